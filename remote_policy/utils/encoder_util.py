"""
Context Encoder

Pure functions that turn the host gateway's live transaction objects into wire
messages. Nothing here mutates the host objects.

Decisions baked into the wire contract:
- Fault attribute values are string-coerced (``None`` becomes the empty string).
- A MessageContext slot is only set when the host holds that message.
- Outbound flow variables are empty unless a caller passes them explicitly.
"""

import logging
from typing import Any, Mapping, Optional

from remote_policy.models import wire_schema as wire
from remote_policy.models.gateway_model import (
    FaultCategory,
    FlowContext,
    FlowInfoValue,
    FlowMapValue,
    FlowVariableValue,
    GatewayExecutionContext,
    GatewayFault,
    GatewayMessage,
    GatewayMessageContext,
)
from remote_policy.utils.error_util import EncodingError

logger = logging.getLogger('remote_policy.callout')

_FAULT_CATEGORIES = {
    FaultCategory.MESSAGING: wire.FaultCategory.MESSAGING,
    FaultCategory.STEP: wire.FaultCategory.STEP,
    FaultCategory.TRANSPORT: wire.FaultCategory.TRANSPORT,
    FaultCategory.SYSTEM: wire.FaultCategory.SYSTEM,
}

_SLOT_CONTEXTS = (
    ('target_request_message', FlowContext.TARGET_REQUEST),
    ('proxy_request_message', FlowContext.PROXY_REQUEST),
    ('target_response_message', FlowContext.TARGET_RESPONSE),
    ('proxy_response_message', FlowContext.PROXY_RESPONSE),
)


def get_flow_type(execution_context: GatewayExecutionContext) -> int:
    # Error flow wins when both flags are set
    if execution_context.is_error_flow():
        return wire.FlowType.ERROR
    if execution_context.is_request_flow():
        return wire.FlowType.REQUEST
    return wire.FlowType.UNKNOWN_FLOW_TYPE


def get_fault_category(category: Any) -> int:
    """Fixed host-to-wire category table; hosts may also report the raw value ('Step')."""
    if not isinstance(category, FaultCategory):
        try:
            category = FaultCategory(category)
        except ValueError:
            return wire.FaultCategory.UNKNOWN_CATEGORY
    return _FAULT_CATEGORIES.get(category, wire.FaultCategory.UNKNOWN_CATEGORY)


def encode_fault(fault: GatewayFault):
    wire_fault = wire.Fault()
    wire_fault.category = get_fault_category(fault.category)
    wire_fault.sub_category = fault.sub_category or ''
    wire_fault.name = fault.name or ''
    if fault.reason is not None:
        wire_fault.reason = fault.reason
    if fault.attributes:
        for key, value in fault.attributes.items():
            wire_fault.attributes[str(key)] = '' if value is None else str(value)
    return wire_fault


def encode_execution_context(execution_context: GatewayExecutionContext):
    """Build the wire ExecutionContext: flow type plus faults in host order."""
    wire_context = wire.ExecutionContext()
    wire_context.flow_type = get_flow_type(execution_context)
    faults = execution_context.get_faults()
    if faults:
        wire_context.faults.extend(encode_fault(fault) for fault in faults)
    return wire_context


def build_flow_info(value: FlowInfoValue):
    flow_info = wire.FlowInfo(identifier=value.identifier)
    for key, variable in value.variables.items():
        flow_info.variables[key] = variable
    return flow_info


def build_flow_map_value(value: FlowMapValue):
    """Build a wire FlowMapValue from one of the two explicit variants.

    Raises:
        TypeError: for any other value type
    """
    if isinstance(value, FlowVariableValue):
        return wire.FlowMapValue(flow_variable=value.value)
    if isinstance(value, FlowInfoValue):
        return wire.FlowMapValue(flow_info=build_flow_info(value))
    raise TypeError(
        f'flow map value must be FlowVariableValue or FlowInfoValue, got {type(value).__name__}'
    )


def encode_message(
    message: GatewayMessage,
    flow_variables: Optional[Mapping[str, FlowMapValue]] = None,
):
    """Build a wire Message.

    Content is UTF-8 encoded (absent content becomes empty bytes). Header and query
    parameter values keep their order and duplicates.
    """
    wire_message = wire.Message()
    content = message.get_content()
    if content is not None:
        wire_message.content = content.encode('utf-8')
    header_names = message.get_header_names()
    if header_names is not None:
        for name in header_names:
            wire_message.header_map[name].headers.extend(message.get_headers(name) or [])
    param_names = message.get_query_param_names()
    if param_names is not None:
        for name in param_names:
            wire_message.query_param_map[name].query_parameters.extend(message.get_query_params(name) or [])
    if flow_variables:
        for key, value in flow_variables.items():
            wire_message.flow_variables[key].CopyFrom(build_flow_map_value(value))
    return wire_message


def encode_message_context(message_context: GatewayMessageContext):
    """Build the wire MessageContext, setting only the slots the host holds."""
    wire_context = wire.MessageContext()
    for slot, flow_context in _SLOT_CONTEXTS:
        message = message_context.get_message(flow_context)
        if message is not None:
            getattr(wire_context, slot).CopyFrom(encode_message(message))
    error_message = message_context.get_error_message()
    if error_message is not None:
        wire_context.error_message.CopyFrom(encode_message(error_message))
    return wire_context


def encode_execution(
    message_context: GatewayMessageContext,
    execution_context: GatewayExecutionContext,
):
    """Compose the request-direction Execution envelope.

    Raises:
        EncodingError: a host accessor raised; the original exception is chained
    """
    try:
        execution = wire.Execution()
        execution.executionContext.CopyFrom(encode_execution_context(execution_context))
        execution.messageContext.CopyFrom(encode_message_context(message_context))
    except Exception as e:
        raise EncodingError(f'Failed to encode execution: {e}') from e
    slots = [slot for slot in wire.MESSAGE_SLOTS if execution.messageContext.HasField(slot)]
    logger.debug(
        f'Encoded execution: flow_type={wire.FlowType.Name(execution.executionContext.flow_type)} '
        f'faults={len(execution.executionContext.faults)} slots={slots}'
    )
    return execution
