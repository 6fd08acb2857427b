"""
Host Gateway Models

Interfaces the callout consumes from the host gateway, plus the native verdict it hands
back. The host owns the concrete objects; this module only describes the accessors the
encoder and the orchestrator call.

- FlowContext / FaultCategory: host-side enums
- GatewayMessage, GatewayMessageContext, GatewayExecutionContext, GatewayFault: protocols
- Action / CalloutResult: native verdict returned to the host
- FlowVariableValue / FlowInfoValue: explicit flow map value variants
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

from pydantic import BaseModel, Field


# ============================================================================
# ENUMS
# ============================================================================

class FlowContext(Enum):
    """Directional message slots of a gateway transaction"""
    TARGET_REQUEST = 'target_request'  # outbound to backend
    PROXY_REQUEST = 'proxy_request'  # inbound from client
    TARGET_RESPONSE = 'target_response'  # inbound from backend
    PROXY_RESPONSE = 'proxy_response'  # outbound to client


class FaultCategory(Enum):
    """Fault categories reported by the host"""
    MESSAGING = 'Messaging'
    STEP = 'Step'
    TRANSPORT = 'Transport'
    SYSTEM = 'System'


class Action(Enum):
    """Terminal verdict of a callout"""
    CONTINUE = 'continue'
    PAUSE = 'pause'
    ABORT = 'abort'


# ============================================================================
# HOST COLLABORATORS
# ============================================================================

class GatewayFault(Protocol):
    category: Any
    sub_category: str
    name: str
    reason: Optional[str]
    attributes: Optional[Mapping[str, Any]]


class GatewayMessage(Protocol):
    def get_content(self) -> Optional[str]: ...

    def set_content(self, content: str) -> None: ...

    def get_header_names(self) -> Optional[List[str]]: ...

    def get_headers(self, name: str) -> List[str]: ...

    def get_query_param_names(self) -> Optional[List[str]]: ...

    def get_query_params(self, name: str) -> List[str]: ...


class GatewayMessageContext(Protocol):
    def get_message(self, flow_context: Optional[FlowContext] = None) -> Optional[GatewayMessage]:
        """Message for the given slot; without a slot, the message of the current flow."""
        ...

    def get_error_message(self) -> Optional[GatewayMessage]: ...

    def set_variable(self, name: str, value: Any) -> None: ...


class GatewayExecutionContext(Protocol):
    def is_error_flow(self) -> bool: ...

    def is_request_flow(self) -> bool: ...

    def get_faults(self) -> Optional[List[GatewayFault]]: ...


# ============================================================================
# FLOW MAP VALUES
# ============================================================================

class FlowVariableValue(BaseModel):
    value: str


class FlowInfoValue(BaseModel):
    identifier: str
    variables: Dict[str, str] = Field(default_factory=dict)


FlowMapValue = Union[FlowVariableValue, FlowInfoValue]


# ============================================================================
# NATIVE VERDICT
# ============================================================================

class CalloutResult(BaseModel):
    action: Action
    success: bool = True
    error_response: str | None = Field(None)
    error_response_headers: Dict[str, str] = Field(default_factory=dict)
    properties: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def abort(cls, cause: str | None = None) -> 'CalloutResult':
        return cls(action=Action.ABORT, success=False, error_response=cause)
