import os
from typing import Mapping

from pydantic import BaseModel, Field

from remote_policy.utils.constants import FlowVariables, Properties
from remote_policy.utils.error_util import ConfigurationError


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class CalloutConfig(BaseModel):
    remote_execution_url: str = Field(..., min_length=1)
    strict_extraction: bool = Field(default_factory=lambda: _env_flag('REMOTE_POLICY_STRICT_EXTRACTION'))
    flow_variable_key: str = Field(FlowVariables.EXAMPLE, min_length=1)

    @classmethod
    def from_properties(cls, properties: Mapping[str, str] | None, **overrides) -> 'CalloutConfig':
        """Read the callout property bag; only ``remote_execution_url`` is recognised."""
        url = (properties or {}).get(Properties.REMOTE_EXECUTION_URL)
        if not url or not str(url).strip():
            raise ConfigurationError(f'Missing callout property {Properties.REMOTE_EXECUTION_URL}')
        values = {k: v for k, v in overrides.items() if v is not None}
        return cls(remote_execution_url=str(url).strip(), **values)
