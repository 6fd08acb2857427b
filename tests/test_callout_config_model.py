import pytest

from remote_policy.models.callout_config_model import CalloutConfig
from remote_policy.utils.error_util import ConfigurationError, ExtractionError, TransportError, describe_exception


def test_from_properties_reads_url():
    config = CalloutConfig.from_properties({'remote_execution_url': ' http://policy.test/x ', 'other': 'ignored'})
    assert config.remote_execution_url == 'http://policy.test/x'
    assert config.strict_extraction is False
    assert config.flow_variable_key == 'Example'


@pytest.mark.parametrize('properties', [None, {}, {'remote_execution_url': ''}, {'remote_execution_url': '   '}])
def test_missing_url(properties):
    with pytest.raises(ConfigurationError, match='remote_execution_url'):
        CalloutConfig.from_properties(properties)


def test_none_overrides_keep_defaults():
    config = CalloutConfig.from_properties({'remote_execution_url': 'u'}, strict_extraction=None, flow_variable_key=None)
    assert config.strict_extraction is False
    assert config.flow_variable_key == 'Example'


@pytest.mark.parametrize('value, expected', [('1', True), ('TRUE', True), ('on', True), ('0', False), ('nope', False)])
def test_strict_extraction_env(monkeypatch, value, expected):
    monkeypatch.setenv('REMOTE_POLICY_STRICT_EXTRACTION', value)
    assert CalloutConfig.from_properties({'remote_execution_url': 'u'}).strict_extraction is expected


def test_explicit_override_beats_env(monkeypatch):
    monkeypatch.setenv('REMOTE_POLICY_STRICT_EXTRACTION', 'true')
    config = CalloutConfig.from_properties({'remote_execution_url': 'u'}, strict_extraction=False)
    assert config.strict_extraction is False


def test_describe_exception():
    assert describe_exception(TransportError('down', status_code=502)) == 'TransportError: down'
    assert describe_exception(ExtractionError('Flow variable Example not found')) == (
        'ExtractionError: Flow variable Example not found'
    )
    assert describe_exception(RuntimeError()) == 'RuntimeError'


def test_error_codes_follow_class():
    assert TransportError('x').error_code == 'RPE002'
    assert ConfigurationError('x').error_code == 'RPE005'
