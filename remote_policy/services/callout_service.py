"""
Remote policy callout.

Entry point the host gateway invokes once per transaction. The transaction state is
encoded into a wire Execution, POSTed to the configured remote endpoint, and the
returned verdict is applied back onto the transaction. Whatever goes wrong, the host
gets an ABORT verdict rather than an exception.
"""

import logging
import time
import uuid
from typing import Mapping, Optional

from remote_policy.models.callout_config_model import CalloutConfig
from remote_policy.models.gateway_model import (
    Action,
    CalloutResult,
    GatewayExecutionContext,
    GatewayMessageContext,
)
from remote_policy.utils import decoder_util, encoder_util
from remote_policy.utils.constants import FlowVariables
from remote_policy.utils.error_codes import ErrorCode
from remote_policy.utils.error_util import (
    ExtractionError,
    ProtocolViolationError,
    RemotePolicyError,
    describe_exception,
)
from remote_policy.utils.http_client import RemoteExecutionClient

logger = logging.getLogger('remote_policy.callout')


class RemotePolicyCallout:
    """Callout executing a policy on a remote HTTP server.

    Args:
        properties: callout property bag; ``remote_execution_url`` is the POST target
        transport: shared transport, a fresh ``RemoteExecutionClient`` by default
        strict_extraction: abort when a CONTINUE response lacks the flow variable;
            defaults to REMOTE_POLICY_STRICT_EXTRACTION (false)
        flow_variable_key: flow variable copied into the outbound message content
    """

    def __init__(
        self,
        properties: Optional[Mapping[str, str]],
        transport: RemoteExecutionClient | None = None,
        strict_extraction: bool | None = None,
        flow_variable_key: str | None = None,
    ) -> None:
        self.properties = dict(properties or {})
        self.transport = transport or RemoteExecutionClient()
        self.strict_extraction = strict_extraction
        self.flow_variable_key = flow_variable_key

    def execute(
        self,
        message_context: GatewayMessageContext,
        execution_context: GatewayExecutionContext,
    ) -> CalloutResult:
        request_id = str(uuid.uuid4())
        start_time = time.time() * 1000
        try:
            config = CalloutConfig.from_properties(
                self.properties,
                strict_extraction=self.strict_extraction,
                flow_variable_key=self.flow_variable_key,
            )
            execution = encoder_util.encode_execution(message_context, execution_context)
            logger.info(f'{request_id} | Remote execution: {config.remote_execution_url}')
            response = self.transport.send(execution, config.remote_execution_url)
            if not response.HasField('executionResult'):
                raise ProtocolViolationError('Remote response carries no ExecutionResult')
            result = decoder_util.decode_execution_result(response.executionResult)
            if result.action is Action.CONTINUE:
                self._apply_content(request_id, message_context, response, config)
            end_time = time.time() * 1000
            logger.info(f'{request_id} | Remote verdict: {result.action.name} | {end_time - start_time:.1f}ms')
            return result
        except Exception as e:
            return self._abort(request_id, message_context, e)

    def _apply_content(
        self,
        request_id: str,
        message_context: GatewayMessageContext,
        response,
        config: CalloutConfig,
    ) -> None:
        try:
            content = decoder_util.extract_flow_variable(response, key=config.flow_variable_key)
        except ExtractionError as e:
            if config.strict_extraction:
                raise
            logger.warning(f'{request_id} | {ErrorCode.EXTRACTION_FAILED} | Content left unchanged: {e}')
            return
        message = message_context.get_message()
        if message is None:
            raise RemotePolicyError('Host transaction has no current message to write content to')
        message.set_content(content)

    def _abort(self, request_id: str, message_context: GatewayMessageContext, exc: Exception) -> CalloutResult:
        cause = describe_exception(exc)
        error_code = getattr(exc, 'error_code', ErrorCode.UNEXPECTED_ERROR)
        if isinstance(exc, RemotePolicyError):
            logger.error(f'{request_id} | {error_code} | Remote execution aborted: {cause}')
        else:
            logger.error(f'{request_id} | {error_code} | Remote execution aborted: {cause}', exc_info=True)
        try:
            message_context.set_variable(FlowVariables.CALLOUT_EXCEPTION, cause)
        except Exception as e:
            logger.warning(f'{request_id} | Could not record {FlowVariables.CALLOUT_EXCEPTION}: {e}')
        return CalloutResult.abort(cause)
