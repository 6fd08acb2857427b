"""
Transport client for remote policy execution.

Sends one serialized Execution to a remote endpoint with a blocking HTTP POST and
parses the response body back into an Execution. One attempt per call: no retries,
no circuit breaking. Timeouts come from the environment unless given explicitly.

Usage:
    transport = RemoteExecutionClient()
    response = transport.send(execution, 'https://policy.example.com/execute')
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

import httpx
from google.protobuf.message import DecodeError

from remote_policy.models import wire_schema as wire
from remote_policy.utils.error_util import TransportError

logger = logging.getLogger('remote_policy.transport')

CONTENT_TYPE = 'application/octet-stream'

AuthHeaderProvider = Callable[[str], Optional[str]]


def build_timeout() -> httpx.Timeout:
    def _f(env_key: str, default: float) -> float:
        try:
            return float(os.getenv(env_key, default))
        except (TypeError, ValueError):
            return default

    return httpx.Timeout(
        connect=_f('HTTP_CONNECT_TIMEOUT', 5.0),
        read=_f('HTTP_READ_TIMEOUT', 30.0),
        write=_f('HTTP_WRITE_TIMEOUT', 30.0),
        pool=_f('HTTP_TIMEOUT', 30.0),
    )


class RemoteExecutionClient:
    """Blocking, one-shot Execution transport.

    A shared ``httpx.Client`` may be injected for connection reuse; it is never closed
    here. Without one, a client is opened and closed around every call. Request state
    lives on the stack, so one instance is safe to use from concurrent callouts.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: httpx.Timeout | None = None,
        auth_header_provider: AuthHeaderProvider | None = None,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._auth_header_provider = auth_header_provider

    def _headers(self, url: str) -> dict:
        headers = {'content-type': CONTENT_TYPE}
        if self._auth_header_provider is not None:
            auth_header = self._auth_header_provider(url)
            if auth_header:
                headers['Authorization'] = auth_header
        return headers

    def _post(self, client: httpx.Client, url: str, body: bytes, headers: dict) -> httpx.Response:
        return client.post(url, content=body, headers=headers, timeout=self._timeout or build_timeout())

    def send(self, execution, url: str):
        """POST ``execution`` to ``url`` and return the parsed response Execution.

        Raises:
            TransportError: connection error, timeout, non-2xx status or a body that is
                not a valid Execution
        """
        body = execution.SerializeToString()
        headers = self._headers(url)
        try:
            if self._client is not None:
                response = self._post(self._client, url, body, headers)
            else:
                with httpx.Client() as client:
                    response = self._post(client, url, body, headers)
        except httpx.TimeoutException as e:
            logger.warning(f'Remote execution timed out: {url}')
            raise TransportError(f'Timed out calling {url}: {e}') from e
        except httpx.HTTPError as e:
            logger.warning(f'Remote execution request failed: {url}: {e}')
            raise TransportError(f'Request to {url} failed: {e}') from e

        if not response.is_success:
            logger.warning(f'Remote execution returned HTTP {response.status_code}: {url}')
            raise TransportError(
                f'Remote endpoint {url} returned HTTP {response.status_code}',
                status_code=response.status_code,
            )
        try:
            result = wire.parse_execution(response.content)
        except DecodeError as e:
            raise TransportError(
                f'Response from {url} is not a valid Execution: {e}',
                status_code=response.status_code,
            ) from e
        logger.debug(f'Remote execution completed: {url} ({len(response.content)} bytes)')
        return result
