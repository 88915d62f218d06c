# src/montecarlo/experiment/convergence.py
# Convergence analysis of a finished accuracy sweep

import numpy as np
from typing import Dict, List
from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.experiment.estimate_record import EstimateRecord
import logging

logger = logging.getLogger(__name__)

REGIONS = ('wide', 'narrow')


class ConvergenceAnalyzer:
    """
    Summarize how fast each region's estimate approaches the exact area.

    Purpose:
        A single sweep is noisy: the error at one N says little. The
        analyzer looks at the tail of the sweep and at the overall trend of
        error against N.

    How it works:
        - Tail mean of relative error over the last tail_fraction of records
        - Least squares slope of log(absolute error) vs log(N); an unbiased
          estimator gives a slope near -0.5
        - The region with the lower tail error is reported as faster

    Example:
        records = driver.run_sweep()
        report = analyzer.analyze(records)
        # {'wide': {'slope': -0.48, ...}, 'narrow': {...}, 'faster_region': 'narrow'}
    """

    def __init__(self, config: UnifiedConfig):
        self.config = config
        self._cache_config_values()

    def _cache_config_values(self):
        experiment_config = self.config.get_section('experiment')
        self.tail_fraction = experiment_config['convergence']['tail_fraction']

        if not 0 < self.tail_fraction <= 1:
            raise ValueError(f"tail_fraction must be in (0, 1], got {self.tail_fraction}")

    def analyze(self, records: List[EstimateRecord]) -> Dict:
        if not records:
            logger.warning("Cannot analyze convergence: no records provided")
            return {}

        n_tail = max(1, int(len(records) * self.tail_fraction))
        tail = records[-n_tail:]

        report = {}
        for region in REGIONS:
            report[region] = self._analyze_region(region, records, tail)

        wide_tail = report['wide']['tail_mean_relative_error']
        narrow_tail = report['narrow']['tail_mean_relative_error']
        if wide_tail is None or narrow_tail is None:
            report['faster_region'] = None
        else:
            report['faster_region'] = 'narrow' if narrow_tail < wide_tail else 'wide'

        report['n_records'] = len(records)
        report['n_tail'] = n_tail
        return report

    def _analyze_region(self, region: str, records: List[EstimateRecord],
                        tail: List[EstimateRecord]) -> Dict:
        """Convergence statistics for one region"""
        tail_errors = [getattr(r, f'{region}_relative_error') for r in tail]
        tail_errors = [e for e in tail_errors if e is not None]

        final_error = getattr(records[-1], f'{region}_relative_error')

        return {
            'final_relative_error': final_error,
            'tail_mean_relative_error': float(np.mean(tail_errors)) if tail_errors else None,
            'slope': self._error_slope(region, records),
        }

    def _error_slope(self, region: str, records: List[EstimateRecord]):
        """Slope of log(absolute error) against log(N), None with fewer than two usable points"""
        ns = []
        errors = []
        for record in records:
            error = getattr(record, f'{region}_absolute_error')
            # log(0) is undefined; an exact hit carries no trend information
            if error > 0:
                ns.append(record.n)
                errors.append(error)

        if len(ns) < 2 or len(set(ns)) < 2:
            return None

        slope, _ = np.polyfit(np.log(ns), np.log(errors), 1)
        return float(slope)
