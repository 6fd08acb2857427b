"""
Example flow variable endpoint.

Sets a string flow variable on the target request message and continues. Paired with
the callout's default ``flow_variable_key``, the value ends up as the gateway's
outbound message content.
"""

from remote_policy.models import wire_schema as wire
from remote_policy.services.remote_handler import RemoteHandler
from remote_policy.utils.constants import Defaults, FlowVariables


class FlowVariableService(RemoteHandler):
    name = 'flow-variable'

    def __init__(self, key: str = FlowVariables.EXAMPLE, value: str = Defaults.EXAMPLE_FLOW_VARIABLE_VALUE):
        self.key = key
        self.value = value

    def handle(self, execution):
        response = wire.Execution()
        response.CopyFrom(execution)
        target = response.messageContext.target_request_message
        target.flow_variables[self.key].flow_variable = self.value
        return response


flow_variable_service = FlowVariableService()
