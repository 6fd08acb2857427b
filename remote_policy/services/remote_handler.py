"""
Base class for remote policy endpoints.

A handler receives serialized Execution bytes and always answers with serialized
Execution bytes: the handled Execution with a CONTINUE result or, on any failure, an
ABORT result whose error_response describes the failure. When the request parsed, the
ABORT answer echoes it unmodified; otherwise the result is the only field set.
"""

import logging
import uuid

from remote_policy.models import wire_schema as wire
from remote_policy.models.gateway_model import Action, CalloutResult
from remote_policy.utils.decoder_util import encode_execution_result
from remote_policy.utils.error_codes import ErrorCode
from remote_policy.utils.error_util import describe_exception

logger = logging.getLogger('remote_policy.remote')


def with_execution_result(execution, result: CalloutResult):
    """Copy of ``execution`` carrying ``result`` as its ExecutionResult."""
    response = wire.Execution()
    response.CopyFrom(execution)
    response.executionResult.CopyFrom(encode_execution_result(result))
    return response


class RemoteHandler:
    name = 'remote'

    def handle(self, execution):
        """Return the Execution to send back; raise to answer with ABORT."""
        raise NotImplementedError

    def service(self, request_bytes: bytes) -> bytes:
        request_id = str(uuid.uuid4())
        execution = None
        try:
            execution = wire.parse_execution(request_bytes)
            handled = self.handle(execution)
            response = with_execution_result(handled, CalloutResult(action=Action.CONTINUE))
            logger.info(f'{request_id} | {self.name} | {wire.Action.Name(response.executionResult.action)}')
        except Exception as e:
            error_code = getattr(e, 'error_code', ErrorCode.UNEXPECTED_ERROR)
            cause = describe_exception(e)
            logger.warning(f'{request_id} | {self.name} | {error_code} | ABORT: {cause}')
            base = execution if execution is not None else wire.Execution()
            response = with_execution_result(base, CalloutResult.abort(cause))
        return response.SerializeToString()
