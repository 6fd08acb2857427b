"""
XML/JSON conversion endpoint.

Converts the target request message content between XML and JSON, selected by the
``conversion`` flow variable on that message: ``xmltojson`` or ``jsontoxml``. Any
other value, or no value, passes the content through unchanged.
"""

from remote_policy.models import wire_schema as wire
from remote_policy.services.remote_handler import RemoteHandler
from remote_policy.utils import conversion_util
from remote_policy.utils.constants import Conversions, FlowVariables
from remote_policy.utils.decoder_util import find_flow_variable
from remote_policy.utils.error_util import ConversionError, ExecutionValidationError

_CONVERTERS = {
    Conversions.XML_TO_JSON: conversion_util.xml_to_json,
    Conversions.JSON_TO_XML: conversion_util.json_to_xml,
}


def validate_execution(execution) -> None:
    if not execution.HasField('messageContext'):
        raise ExecutionValidationError('missing MessageContext')
    if not execution.messageContext.HasField('target_request_message'):
        raise ExecutionValidationError('missing target_request_message')


class ConversionService(RemoteHandler):
    name = 'conversion'

    def handle(self, execution):
        validate_execution(execution)
        conversion = find_flow_variable(execution, FlowVariables.CONVERSION)
        converter = _CONVERTERS.get(conversion)
        if converter is None:
            return execution
        try:
            content = execution.messageContext.target_request_message.content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ConversionError(f'Content is not valid UTF-8: {e}') from e

        converted = wire.Execution()
        converted.CopyFrom(execution)
        converted.messageContext.target_request_message.content = converter(content).encode('utf-8')
        return converted


conversion_service = ConversionService()
