# tests/montecarlo/estimation/test_estimator.py
"""
pytest-bdd test runner for the Monte Carlo estimator
Tests determinism, bounds, sample-count guards and accuracy
"""
import logging
import math
from pathlib import Path

import numpy as np
import pytest
from pytest_bdd import scenarios, given, when, then, parsers

from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.estimation.estimator import MonteCarloEstimator, count_inside, estimate_area
from src.montecarlo.geometry.circle_set import build_circle_set, build_region
from src.montecarlo.reference.exact_area import exact_intersection_area, numerical_intersection_area
from src.montecarlo.sampling.sampler import InvalidSampleCountError

# Load scenarios from estimator.feature
scenarios('estimator.feature')

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


# =============================================================================
# GIVEN steps - Setup
# =============================================================================
@given(parsers.parse('config files are available in {config_directory}'))
def load_configuration_file(test_context, config_directory):
    """Load configuration file from specified directory"""

    root_path = Path(__file__).parent.parent.parent.parent
    config_path = root_path / config_directory

    assert config_path.exists(), f"Configuration file not found: {config_path}"
    unified_config = UnifiedConfig(config_path=str(config_path), environment="test")

    test_context['unified_config'] = unified_config


@given('the circle set and regions from config')
def given_geometry_from_config(test_context):
    config = test_context['unified_config']
    test_context['circles'] = build_circle_set(config)
    test_context['regions'] = {
        'wide': build_region(config, 'wide'),
        'narrow': build_region(config, 'narrow'),
    }


# =============================================================================
# WHEN steps - Actions
# =============================================================================
@when(parsers.parse('I estimate over the {region_name} region with {n_samples} samples and seed {seed} twice'))
def when_estimate_twice(test_context, region_name, n_samples, seed):
    region = test_context['regions'][region_name]
    circles = test_context['circles']

    test_context['first_estimate'] = estimate_area(circles, region, int(n_samples), int(seed))
    test_context['second_estimate'] = estimate_area(circles, region, int(n_samples), int(seed))


@when(parsers.parse('I estimate over the {region_name} region with {n_samples} samples and seed {seed} with both paths'))
def when_estimate_both_paths(test_context, region_name, n_samples, seed):
    region = test_context['regions'][region_name]
    circles = test_context['circles']
    n = int(n_samples)

    scalar_count = count_inside(circles, region, n, int(seed), vectorized=False)
    vector_count = count_inside(circles, region, n, int(seed), vectorized=True)

    test_context['first_estimate'] = (scalar_count / n) * region.area()
    test_context['second_estimate'] = (vector_count / n) * region.area()


@when(parsers.parse('I estimate over the {region_name} region with {n_samples:d} samples and seed {seed:d}'))
def when_estimate(test_context, region_name, n_samples, seed):
    region = test_context['regions'][region_name]
    test_context['region'] = region

    try:
        test_context['estimate'] = estimate_area(test_context['circles'], region, int(n_samples), int(seed))
        test_context['estimate_error'] = None
    except Exception as e:
        test_context['estimate'] = None
        test_context['estimate_error'] = e


@when(parsers.parse('I run the configured estimator over the {region_name} region with {n_samples} samples and seed {seed}'))
def when_run_configured_estimator(test_context, region_name, n_samples, seed):
    estimator = MonteCarloEstimator(test_context['unified_config'])
    region = test_context['regions'][region_name]

    test_context['detailed_estimate'] = estimator.estimate(test_context['circles'], region,
                                                           int(n_samples), int(seed))
    test_context['region'] = region


# =============================================================================
# THEN steps - Assertions
# =============================================================================
@then('both estimates should be identical')
def then_estimates_identical(test_context):
    assert test_context['first_estimate'] == test_context['second_estimate']


@then('the estimate should be either 0 or the region area')
def then_zero_or_region_area(test_context):
    estimate = test_context['estimate']
    assert estimate in (0.0, test_context['region'].area()), f"Unexpected single-sample estimate {estimate}"


@then('the estimate should be between 0 and the region area')
def then_estimate_bounded(test_context):
    estimate = test_context['estimate']
    assert 0.0 <= estimate <= test_context['region'].area()


@then('an InvalidSampleCountError should be raised')
def then_invalid_sample_count(test_context):
    error = test_context['estimate_error']
    assert isinstance(error, InvalidSampleCountError), f"Expected InvalidSampleCountError, got {error!r}"


@then(parsers.parse('the relative error against the exact area should be below {threshold}'))
def then_relative_error_below(test_context, threshold):
    exact = exact_intersection_area()
    rel_error = abs(test_context['estimate'] - exact) / exact
    assert rel_error < float(threshold), f"Relative error {rel_error:.4f} exceeds {threshold}"


@then(parsers.parse('the estimate should be within {tolerance} of the intersection area inside the region'))
def then_estimate_near_clipped_area(test_context, tolerance):
    clipped = numerical_intersection_area(test_context['circles'], region=test_context['region'])
    assert clipped == pytest.approx(math.pi / 4, abs=1e-6)
    assert abs(test_context['estimate'] - clipped) < float(tolerance)


@then('the detailed estimate should be consistent with its counts')
def then_detailed_estimate_consistent(test_context):
    result = test_context['detailed_estimate']
    region = test_context['region']

    assert result.n_samples == 10000
    assert result.region_area == region.area()
    assert result.area == (result.inside_count / result.n_samples) * region.area()
    assert result.hit_rate == pytest.approx(result.area / region.area())

    expected_se = region.area() * math.sqrt(result.hit_rate * (1 - result.hit_rate) / result.n_samples)
    assert result.standard_error == pytest.approx(expected_se)
    assert result.area == estimate_area(test_context['circles'], region, 10000, 8)
    assert set(result.to_dict()) >= {'area', 'inside_count', 'hit_rate', 'standard_error'}


# =============================================================================
# Plain pytest checks
# =============================================================================
def test_relative_error_averaged_over_seeds_shrinks_with_n():
    from src.montecarlo.geometry.circle_set import DEFAULT_CIRCLES, WIDE_REGION

    exact = exact_intersection_area()

    def mean_relative_error(n):
        errors = [abs(estimate_area(DEFAULT_CIRCLES, WIDE_REGION, n, seed) - exact) / exact
                  for seed in range(40)]
        return np.mean(errors)

    assert mean_relative_error(20000) < mean_relative_error(200)
