from typing import Callable

import httpx
import pytest

from remote_policy.models import wire_schema as wire
from remote_policy.utils.error_util import TransportError
from remote_policy.utils.http_client import CONTENT_TYPE, RemoteExecutionClient, build_timeout

URL = 'http://policy.test/execute'


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _request_execution():
    execution = wire.Execution()
    execution.messageContext.target_request_message.content = b'payload'
    execution.executionContext.flow_type = wire.FlowType.REQUEST
    return execution


def _response_execution(action=wire.Action.CONTINUE):
    execution = wire.Execution()
    execution.executionResult.action = action
    return execution


def test_posts_serialized_execution_and_parses_reply():
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen['method'] = req.method
        seen['content_type'] = req.headers.get('content-type')
        seen['body'] = req.content
        return httpx.Response(200, content=_response_execution(wire.Action.PAUSE).SerializeToString())

    request = _request_execution()
    with _client(handler) as client:
        response = RemoteExecutionClient(client=client).send(request, URL)

    assert seen['method'] == 'POST'
    assert seen['content_type'] == CONTENT_TYPE
    assert wire.parse_execution(seen['body']) == request
    assert response.executionResult.action == wire.Action.PAUSE


@pytest.mark.parametrize('status', [400, 404, 500, 503])
def test_non_success_status_raises(status):
    with _client(lambda req: httpx.Response(status, content=b'')) as client:
        with pytest.raises(TransportError) as exc_info:
            RemoteExecutionClient(client=client).send(_request_execution(), URL)
    assert exc_info.value.status_code == status
    assert str(status) in str(exc_info.value)


def test_malformed_body_raises():
    with _client(lambda req: httpx.Response(200, content=b'not a protobuf')) as client:
        with pytest.raises(TransportError, match='not a valid Execution'):
            RemoteExecutionClient(client=client).send(_request_execution(), URL)


def test_connection_error_raises():
    def handler(req: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError('connection refused', request=req)

    with _client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            RemoteExecutionClient(client=client).send(_request_execution(), URL)
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_timeout_raises():
    def handler(req: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout('too slow', request=req)

    with _client(handler) as client:
        with pytest.raises(TransportError, match='Timed out'):
            RemoteExecutionClient(client=client).send(_request_execution(), URL)


def test_auth_header_from_provider():
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen['authorization'] = req.headers.get('authorization')
        return httpx.Response(200, content=_response_execution().SerializeToString())

    with _client(handler) as client:
        transport = RemoteExecutionClient(client=client, auth_header_provider=lambda url: 'Bearer abc')
        transport.send(_request_execution(), URL)

    assert seen['authorization'] == 'Bearer abc'


def test_no_auth_header_by_default():
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen['authorization'] = req.headers.get('authorization')
        return httpx.Response(200, content=_response_execution().SerializeToString())

    with _client(handler) as client:
        RemoteExecutionClient(client=client, auth_header_provider=lambda url: None).send(_request_execution(), URL)

    assert seen['authorization'] is None


def test_injected_client_is_left_open():
    client = _client(lambda req: httpx.Response(200, content=_response_execution().SerializeToString()))
    transport = RemoteExecutionClient(client=client)
    transport.send(_request_execution(), URL)
    transport.send(_request_execution(), URL)
    assert not client.is_closed
    client.close()


def test_timeout_from_env(monkeypatch):
    monkeypatch.setenv('HTTP_CONNECT_TIMEOUT', '1.5')
    monkeypatch.setenv('HTTP_READ_TIMEOUT', '2')
    monkeypatch.setenv('HTTP_WRITE_TIMEOUT', 'bogus')
    monkeypatch.delenv('HTTP_TIMEOUT', raising=False)

    timeout = build_timeout()

    assert timeout.connect == 1.5
    assert timeout.read == 2.0
    assert timeout.write == 30.0
    assert timeout.pool == 30.0
