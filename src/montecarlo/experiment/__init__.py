# src/montecarlo/experiment/__init__.py
"""
Experiment package - accuracy sweep over sample counts

Public API: records and the driver.
"""

from .estimate_record import EstimateRecord
from .experiment_driver import ExperimentDriver, SweepSettings, ConfigurationError

__all__ = [
    'EstimateRecord',
    'ExperimentDriver',
    'SweepSettings',
    'ConfigurationError',
]
