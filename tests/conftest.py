"""
Pytest configuration for remote policy tests.

Provides in-memory stand-ins for the host gateway objects the callout reads from and
writes to, plus small helpers for building wire messages.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

# Keep env-driven settings deterministic
os.environ.pop('REMOTE_POLICY_STRICT_EXTRACTION', None)
os.environ.setdefault('LOG_FORMAT', 'plain')


class FakeMessage:
    def __init__(self, content: Optional[str] = None, headers=None, query_params=None):
        self.content = content
        # name -> ordered values, duplicates allowed
        self.headers: Dict[str, List[str]] = {k: list(v) for k, v in (headers or {}).items()}
        self.query_params: Dict[str, List[str]] = {k: list(v) for k, v in (query_params or {}).items()}

    def add_header(self, name: str, value: str) -> None:
        self.headers.setdefault(name, []).append(value)

    def get_content(self):
        return self.content

    def set_content(self, content: str) -> None:
        self.content = content

    def get_header_names(self):
        return list(self.headers)

    def get_headers(self, name: str):
        return self.headers.get(name, [])

    def get_query_param_names(self):
        return list(self.query_params)

    def get_query_params(self, name: str):
        return self.query_params.get(name, [])


class FakeMessageContext:
    def __init__(self, messages=None, error_message=None, current=None):
        self.messages = dict(messages or {})
        self.error_message = error_message
        self.current = current if current is not None else FakeMessage()
        self.variables: Dict[str, Any] = {}

    def get_message(self, flow_context=None):
        if flow_context is None:
            return self.current
        return self.messages.get(flow_context)

    def get_error_message(self):
        return self.error_message

    def set_variable(self, name: str, value: Any) -> None:
        self.variables[name] = value


@dataclass
class FakeFault:
    category: Any
    sub_category: str = ''
    name: str = ''
    reason: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None


@dataclass
class FakeExecutionContext:
    error_flow: bool = False
    request_flow: bool = False
    faults: Optional[List[FakeFault]] = field(default_factory=list)

    def is_error_flow(self) -> bool:
        return self.error_flow

    def is_request_flow(self) -> bool:
        return self.request_flow

    def get_faults(self):
        return self.faults


class RecordingTransport:
    """Transport double returning a canned Execution (or raising)."""

    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls = []

    def send(self, execution, url):
        self.calls.append((execution, url))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def message_context():
    return FakeMessageContext()


@pytest.fixture
def execution_context():
    return FakeExecutionContext(request_flow=True)
