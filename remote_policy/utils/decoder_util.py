"""
Result Decoder

Maps wire ExecutionResult messages to the host's native verdict and back, and reads
flow variables out of a returned Execution.
"""

from typing import Optional

from remote_policy.models import wire_schema as wire
from remote_policy.models.gateway_model import Action, CalloutResult
from remote_policy.utils.error_util import ExtractionError

_WIRE_ACTIONS = {
    Action.CONTINUE: wire.Action.CONTINUE,
    Action.PAUSE: wire.Action.PAUSE,
    Action.ABORT: wire.Action.ABORT,
}


def decode_action(wire_action: int) -> Action:
    # Anything but PAUSE/ABORT continues, UNKNOWN_ACTION and unknown numbers included
    if wire_action == wire.Action.ABORT:
        return Action.ABORT
    if wire_action == wire.Action.PAUSE:
        return Action.PAUSE
    return Action.CONTINUE


def decode_execution_result(wire_result) -> CalloutResult:
    action = decode_action(wire_result.action)
    return CalloutResult(
        action=action,
        success=action is not Action.ABORT,
        error_response=wire_result.error_response,
        error_response_headers=dict(wire_result.error_response_headers),
        properties=dict(wire_result.properties),
    )


def encode_execution_result(result: CalloutResult):
    """Build a wire ExecutionResult from a native verdict (used by remote handlers)."""
    wire_result = wire.ExecutionResult()
    wire_result.action = _WIRE_ACTIONS.get(result.action, wire.Action.UNKNOWN_ACTION)
    if result.error_response is not None:
        wire_result.error_response = result.error_response
    for key, value in result.error_response_headers.items():
        wire_result.error_response_headers[str(key)] = str(value)
    for key, value in result.properties.items():
        wire_result.properties[str(key)] = str(value)
    return wire_result


def extract_flow_variable(execution, key: str, slot_name: str = 'target_request_message') -> str:
    """Return the string flow variable ``key`` from a message slot of ``execution``.

    Raises:
        ExtractionError: missing MessageContext, slot or key, or the entry carries a
            FlowInfo instead of a string
    """
    if not execution.HasField('messageContext'):
        raise ExtractionError('Execution has no messageContext')
    if slot_name not in wire.MESSAGE_SLOTS:
        raise ExtractionError(f'Unknown message slot {slot_name}')
    message_context = execution.messageContext
    if not message_context.HasField(slot_name):
        raise ExtractionError(f'messageContext has no {slot_name}')
    flow_variables = getattr(message_context, slot_name).flow_variables
    if key not in flow_variables:
        raise ExtractionError(f'Flow variable {key} not found in {slot_name}')
    value = flow_variables[key]
    if value.WhichOneof('value') != 'flow_variable':
        raise ExtractionError(f'Flow variable {key} in {slot_name} is not a string value')
    return value.flow_variable


def find_flow_variable(execution, key: str, slot_name: str = 'target_request_message') -> Optional[str]:
    try:
        return extract_flow_variable(execution, key, slot_name)
    except ExtractionError:
        return None
