"""
Wire Message Schema

Compiles ``proto/execute.proto`` with ``grpc_tools.protoc`` on first import and exposes
the generated message classes and enum wrappers. The .proto file is the only definition
of the schema; remote implementers compile the same file.

Environment:
    REMOTE_POLICY_GENERATED_DIR: output directory for generated modules
        (defaults to a ``remote_policy_generated`` directory under the system temp dir)

Usage:
    from remote_policy.models import wire_schema as wire

    execution = wire.Execution()
    execution.executionResult.action = wire.Action.CONTINUE
    data = execution.SerializeToString()
    same = wire.parse_execution(data)
"""

import hashlib
import importlib.util
import logging
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

logger = logging.getLogger('remote_policy.callout')

PACKAGE_ROOT = Path(__file__).resolve().parents[2]
PROTO_PATH = Path(__file__).resolve().parents[1] / 'proto' / 'execute.proto'
PROTO_NAME = PROTO_PATH.relative_to(PACKAGE_ROOT).as_posix()
PB2_NAME = PROTO_NAME.replace('.proto', '_pb2.py')

# MessageContext slot names, in field-number order.
MESSAGE_SLOTS = (
    'target_request_message',
    'proxy_request_message',
    'target_response_message',
    'proxy_response_message',
    'error_message',
)


def _generated_dir() -> Path:
    base = os.getenv('REMOTE_POLICY_GENERATED_DIR') or str(Path(tempfile.gettempdir()) / 'remote_policy_generated')
    # One directory per schema revision so a changed .proto is never served stale
    digest = hashlib.sha256(PROTO_PATH.read_bytes()).hexdigest()[:16]
    return Path(base) / digest


def compile_proto() -> Path:
    """Run protoc over execute.proto and return the path of the generated module.

    Raises:
        RuntimeError: protoc failed
    """
    generated_dir = _generated_dir()
    module_path = generated_dir / PB2_NAME
    if module_path.exists():
        return module_path

    generated_dir.mkdir(parents=True, exist_ok=True)
    staging_dir = Path(tempfile.mkdtemp(dir=generated_dir))
    try:
        subprocess.run(
            [
                sys.executable,
                '-m',
                'grpc_tools.protoc',
                f'--proto_path={PACKAGE_ROOT}',
                f'--python_out={staging_dir}',
                str(PROTO_PATH),
            ],
            check=True,
            capture_output=True,
        )
        module_path.parent.mkdir(parents=True, exist_ok=True)
        os.replace(staging_dir / PB2_NAME, module_path)
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode('utf-8', 'replace').strip() if e.stderr else ''
        raise RuntimeError(f'protoc failed for {PROTO_PATH}: {stderr}') from e
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)
    logger.info(f'Proto compiled: src={PROTO_PATH} out={module_path}')
    return module_path


def _load_generated_module():
    module_path = compile_proto()
    module_spec = importlib.util.spec_from_file_location('remote_policy_execute_pb2', module_path)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


execute_pb2 = _load_generated_module()

Execution = execute_pb2.Execution
ExecutionContext = execute_pb2.ExecutionContext
Fault = execute_pb2.ExecutionContext.Fault
MessageContext = execute_pb2.MessageContext
Message = execute_pb2.Message
Headers = execute_pb2.Message.Headers
QueryParameters = execute_pb2.Message.QueryParameters
FlowMapValue = execute_pb2.Message.FlowMapValue
FlowInfo = execute_pb2.FlowInfo
ExecutionResult = execute_pb2.ExecutionResult

FlowType = execute_pb2.ExecutionContext.FlowType
FaultCategory = execute_pb2.ExecutionContext.Fault.Category
Action = execute_pb2.ExecutionResult.Action


def parse_execution(data: bytes):
    """Deserialize an Execution; raises ``google.protobuf.message.DecodeError`` on bad input."""
    execution = Execution()
    execution.ParseFromString(data)
    return execution
