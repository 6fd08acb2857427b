"""
Remote policy server.

Serves the example remote policy endpoints over FastAPI. Run with the
``remote-policy-server`` console script or ``uvicorn remote_policy.app:remote_policy_app``.
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from remote_policy.routes.remote_policy_routes import remote_policy_router
from remote_policy.utils.constants import Defaults
from remote_policy.utils.logging_util import configure_logging

load_dotenv()
configure_logging()

logger = logging.getLogger('remote_policy.remote')

remote_policy_app = FastAPI(
    title='remote-policy',
    description='Remote policy execution endpoints for gateway callouts',
    version='0.1.0',
)

remote_policy_app.include_router(remote_policy_router, tags=['Remote Policy'])


def run() -> None:
    host = os.getenv('HOST', Defaults.HOST)
    try:
        port = int(os.getenv('PORT', Defaults.PORT))
    except ValueError:
        logger.warning(f'Invalid PORT {os.getenv("PORT")!r}; using {Defaults.PORT}')
        port = Defaults.PORT
    logger.info(f'Starting remote policy server on {host}:{port}')
    uvicorn.run(remote_policy_app, host=host, port=port, log_level=os.getenv('LOG_LEVEL', 'info').lower())


if __name__ == '__main__':
    run()
