from remote_policy.models import wire_schema as wire
from remote_policy.services.flow_variable_service import FlowVariableService, flow_variable_service


def test_sets_example_variable_and_continues():
    request = wire.Execution()
    request.messageContext.target_request_message.content = b'body'

    response = wire.parse_execution(flow_variable_service.service(request.SerializeToString()))

    target = response.messageContext.target_request_message
    assert response.executionResult.action == wire.Action.CONTINUE
    assert target.flow_variables['Example'].flow_variable == 'Hello'
    assert target.content == b'body'


def test_creates_target_message_when_absent():
    response = wire.parse_execution(flow_variable_service.service(wire.Execution().SerializeToString()))

    assert response.messageContext.HasField('target_request_message')
    assert response.messageContext.target_request_message.flow_variables['Example'].flow_variable == 'Hello'


def test_custom_key_and_value_replace_existing_entry():
    request = wire.Execution()
    request.messageContext.target_request_message.flow_variables['greeting'].flow_info.identifier = 'old'

    response = wire.parse_execution(FlowVariableService('greeting', 'hi').service(request.SerializeToString()))

    entry = response.messageContext.target_request_message.flow_variables['greeting']
    assert entry.WhichOneof('value') == 'flow_variable'
    assert entry.flow_variable == 'hi'


def test_unparseable_request_aborts():
    response = wire.parse_execution(flow_variable_service.service(b'not a protobuf'))

    assert response.executionResult.action == wire.Action.ABORT
    assert response.executionResult.error_response
