# tests/montecarlo/config/test_unified_config.py
"""
pytest-bdd test runner for UnifiedConfig
"""
import logging
from pathlib import Path

import pytest
from pytest_bdd import scenarios, given, when, then, parsers

from src.montecarlo.config.unified_config import UnifiedConfig

# Load scenarios from unified_config.feature
scenarios('unified_config.feature')

# Set up debug logging for tests
logging.basicConfig(level=logging.DEBUG, format='%(name)s - %(levelname)s - %(message)s')


# Test fixtures and shared state
@pytest.fixture
def test_context(request):
    """A per-scenario context dict with scenario name pre-attached."""
    ctx = {}
    scenario = getattr(request.node._obj, "__scenario__", None)
    if scenario:
        ctx["scenario_name"] = scenario.name
    else:
        ctx["scenario_name"] = request.node.name
    return ctx


def _load(config_directory: str, environment: str) -> UnifiedConfig:
    root_path = Path(__file__).parent.parent.parent.parent
    config_path = root_path / config_directory

    assert config_path.exists(), f"Configuration file not found: {config_path}"
    return UnifiedConfig(config_path=str(config_path), environment=environment)


# =============================================================================
# GIVEN steps - Setup
# =============================================================================
@given(parsers.parse('config files are available in {config_directory} with environment {environment}'))
def load_configuration_for_environment(test_context, config_directory, environment):
    test_context['unified_config'] = _load(config_directory, environment)


@given(parsers.parse('config files are available in {config_directory:S}'))
def load_configuration_file(test_context, config_directory):
    """Load configuration file from specified directory"""
    test_context['unified_config'] = _load(config_directory, "test")


# =============================================================================
# WHEN steps - Actions
# =============================================================================
@when(parsers.parse('I update experiment.sweep.stop to {stop:d}'))
def when_update_stop(test_context, stop):
    test_context['unified_config'].update_config({'experiment': {'sweep': {'stop': stop}}})


@when(parsers.parse('I remove the {section} section'))
def when_remove_section(test_context, section):
    config = test_context['unified_config']
    del config.config[section]
    config._cache_config_sections()


@when('I save the configuration to a single file and reload it')
def when_save_and_reload(test_context, tmp_path):
    config = test_context['unified_config']
    saved_path = config.save_config(str(tmp_path / 'combined.json'))
    test_context['reloaded'] = UnifiedConfig(config_path=saved_path, environment="test")


# =============================================================================
# THEN steps - Assertions
# =============================================================================
@then(parsers.parse('the experiment sweep should be start {start:d}, stop {stop:d}, step {step:d}'))
def then_sweep(test_context, start, stop, step):
    sweep = test_context['unified_config'].get_section('experiment')['sweep']
    assert (sweep['start'], sweep['stop'], sweep['step']) == (start, stop, step)


@then(parsers.parse('the seed policy should be {policy}'))
def then_seed_policy(test_context, policy):
    assert test_context['unified_config'].experiment['seed_policy'] == policy


@then('the configuration should validate without issues')
def then_validates(test_context):
    issues = test_context['unified_config'].validate_config()
    assert issues['missing_sections'] == []
    assert issues['invalid_values'] == []


@then(parsers.parse('validation should report missing section {section}'))
def then_reports_missing(test_context, section):
    issues = test_context['unified_config'].validate_config()
    assert section in issues['missing_sections']


@then('the reloaded configuration should equal the original')
def then_reloaded_equal(test_context):
    reloaded = test_context['reloaded']
    assert reloaded.multi_file_mode is False
    assert reloaded.config == test_context['unified_config'].config


@then(parsers.parse('the configuration info should report multi-file mode for environment {environment}'))
def then_info_mode(test_context, environment):
    config = test_context['unified_config']
    info = config.get_config_info()
    assert info['multi_file_mode'] is True
    assert info['environment'] == environment
    assert info['config_path'] == config.config_path
    assert info['total_sections'] == len(info['sections_loaded'])


@then(parsers.parse('the configuration info should list the sections {sections}'))
def then_info_sections(test_context, sections):
    info = test_context['unified_config'].get_config_info()
    for section in sections.split(','):
        assert section.strip() in info['sections_loaded']
