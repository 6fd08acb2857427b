"""
Remote policy routes.

Binary endpoints the gateway callout POSTs serialized Execution messages to. They
always answer 200 with a serialized Execution; failures travel inside it as an ABORT
ExecutionResult.
"""

import logging

from fastapi import APIRouter, Request, Response

from remote_policy.services.conversion_service import conversion_service
from remote_policy.services.flow_variable_service import flow_variable_service
from remote_policy.utils.http_client import CONTENT_TYPE

remote_policy_router = APIRouter()
logger = logging.getLogger('remote_policy.remote')


"""
Convert target request content between XML and JSON

Request:
application/octet-stream (serialized Execution)
Response:
application/octet-stream (serialized Execution)
"""


@remote_policy_router.post('/remote-policy/conversion')
async def convert_content(request: Request):
    body = await request.body()
    return Response(content=conversion_service.service(body), media_type=CONTENT_TYPE)


"""
Set the example flow variable on the target request message

Request:
application/octet-stream (serialized Execution)
Response:
application/octet-stream (serialized Execution)
"""


@remote_policy_router.post('/remote-policy/flow-variable')
async def set_flow_variable(request: Request):
    body = await request.body()
    return Response(content=flow_variable_service.service(body), media_type=CONTENT_TYPE)


@remote_policy_router.get('/remote-policy/health')
async def health():
    return {'status': 'online'}
