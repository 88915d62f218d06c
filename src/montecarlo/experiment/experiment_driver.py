# src/montecarlo/experiment/experiment_driver.py
"""
ExperimentDriver - accuracy sweep of the Monte Carlo estimator

For every sample count N of an arithmetic progression the estimator is run
once over the wide region and once over the narrow region, and both
estimates are compared with the exact reference area.

Wide vs narrow keeps the circles fixed and changes only how much of the
sampling domain is wasted outside the circles, so the two error columns
show how sampling efficiency drives convergence at equal N.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence

import numpy as np

from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.estimation.estimator import MonteCarloEstimator
from src.montecarlo.experiment.estimate_record import (
    DEFAULT_ZERO_THRESHOLD,
    EstimateRecord,
    absolute_error,
    relative_error,
)
from src.montecarlo.geometry.circle_set import build_circle_set, build_region, region_clips_intersection
from src.montecarlo.geometry.primitives import Circle, Region
from src.montecarlo.reference.exact_area import exact_intersection_area
from src.montecarlo.sampling.sampler import SeedPolicy, derive_seed, validate_sample_count

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, EstimateRecord], None]


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid"""
    def __init__(self, message: str, config_section: str = None):
        super().__init__(message)
        self.config_section = config_section


@dataclass(frozen=True)
class SweepSettings:
    """Inclusive arithmetic progression of sample counts"""

    start: int = 100
    stop: int = 100000
    step: int = 500

    def __post_init__(self):
        if self.start <= 0:
            raise ConfigurationError(f"Sweep start must be positive, got {self.start}", 'experiment.sweep')
        if self.step <= 0:
            raise ConfigurationError(f"Sweep step must be positive, got {self.step}", 'experiment.sweep')
        if self.stop < self.start:
            raise ConfigurationError(
                f"Sweep stop {self.stop} is below start {self.start}", 'experiment.sweep')

    def sample_counts(self) -> Iterator[int]:
        return iter(range(self.start, self.stop + 1, self.step))

    def __len__(self) -> int:
        return (self.stop - self.start) // self.step + 1


@dataclass(frozen=True)
class ReplicatedEstimate:
    """Statistics of repeated independent estimates at one sample count"""

    n: int
    repetitions: int
    mean_area: float
    std_area: float
    mean_absolute_error: float
    mean_relative_error: Optional[float]


def run_sweep(circles: Sequence[Circle],
              wide_region: Region,
              narrow_region: Region,
              sweep: SweepSettings,
              exact: float,
              seed_policy: SeedPolicy = SeedPolicy.SAMPLE_COUNT,
              experiment_seed: int = 0,
              zero_threshold: float = DEFAULT_ZERO_THRESHOLD,
              estimator: Optional[MonteCarloEstimator] = None,
              progress_callback: Optional[ProgressCallback] = None) -> List[EstimateRecord]:
    """
    Run the sweep and return one EstimateRecord per sample count, ascending

    Any error aborts the whole sweep; no partial result is returned.
    """
    estimator = estimator or MonteCarloEstimator()
    total = len(sweep)
    records = []

    for index, n in enumerate(sweep.sample_counts()):
        seed = derive_seed(seed_policy, n, experiment_seed=experiment_seed)
        wide = estimator.estimate(circles, wide_region, n, seed)
        narrow = estimator.estimate(circles, narrow_region, n, seed)

        record = EstimateRecord.from_estimates(n, wide.area, narrow.area, exact, zero_threshold)
        records.append(record)

        if progress_callback is not None:
            progress_callback(index, total, record)

    return records


class ExperimentDriver:
    """
    Configured accuracy experiment

    Example:
        driver = ExperimentDriver(UnifiedConfig(environment="prod"))
        records = driver.run_sweep()  # 200 EstimateRecords, N = 100 .. 99600
    """

    def __init__(self, config: UnifiedConfig):
        self.config = config
        self._cache_config_values()

        self.circles = build_circle_set(config)
        self.wide_region = build_region(config, 'wide')
        self.narrow_region = build_region(config, 'narrow')
        self.exact_area = exact_intersection_area()
        self.estimator = MonteCarloEstimator(config)

        logger.info("ExperimentDriver initialized")

    def _cache_config_values(self):
        """Cache experiment configuration values - fail hard if missing"""
        general_config = self.config.get_section('general')
        if not general_config:
            raise ConfigurationError("Missing required section: 'general'", 'general')

        experiment_config = self.config.get_section('experiment')
        if not experiment_config:
            raise ConfigurationError("Missing required section: 'experiment'", 'experiment')

        self.experiment_seed = general_config['experiment_seed']
        self.zero_threshold = general_config['zero_threshold']

        sweep_config = experiment_config['sweep']
        self.sweep = SweepSettings(
            start=int(sweep_config['start']),
            stop=int(sweep_config['stop']),
            step=int(sweep_config['step']),
        )

        try:
            self.seed_policy = SeedPolicy(experiment_config['seed_policy'])
        except ValueError:
            raise ConfigurationError(
                f"Invalid seed policy: {experiment_config['seed_policy']}", 'experiment.seed_policy')

        self.repetitions = int(experiment_config['repetitions'])
        self.progress_interval = int(experiment_config['progress_interval'])

    def _log_progress(self, index: int, total: int, record: EstimateRecord):
        if self.progress_interval > 0 and (index + 1) % self.progress_interval == 0:
            logger.info(f"Processed N = {record.n} ({index + 1}/{total})")

    def run_sweep(self, progress_callback: Optional[ProgressCallback] = None) -> List[EstimateRecord]:
        """
        Run the configured sweep

        Args:
            progress_callback: Optional hook called with (index, total, record)
                after every sample count

        Returns:
            List of EstimateRecord in ascending N order
        """
        logger.info("Starting experiment...")
        logger.info(f"Exact area: {self.exact_area}")
        logger.info(f"Wide region area: {self.wide_region.area()}")
        logger.info(f"Narrow region area: {self.narrow_region.area()}")
        logger.info(f"Sweep: N = {self.sweep.start}..{self.sweep.stop} step {self.sweep.step} "
                    f"({len(self.sweep)} steps), seed policy '{self.seed_policy.value}'")

        for name, region in [('wide', self.wide_region), ('narrow', self.narrow_region)]:
            if region_clips_intersection(self.circles, region):
                logger.warning(f"Region '{name}' does not contain the whole intersection; "
                               f"its estimates converge to the clipped area")

        def on_progress(index: int, total: int, record: EstimateRecord):
            self._log_progress(index, total, record)
            if progress_callback is not None:
                progress_callback(index, total, record)

        try:
            records = run_sweep(
                self.circles,
                self.wide_region,
                self.narrow_region,
                self.sweep,
                self.exact_area,
                seed_policy=self.seed_policy,
                experiment_seed=self.experiment_seed,
                zero_threshold=self.zero_threshold,
                estimator=self.estimator,
                progress_callback=on_progress,
            )
        except Exception as e:
            logger.error(f"Sweep aborted: {e}")
            raise

        logger.info(f"Experiment completed with {len(records)} records")
        return records

    def run_replicated(self, n: int, repetitions: Optional[int] = None) -> Dict[str, ReplicatedEstimate]:
        """
        Repeat the estimate at one sample count with independent seeds

        Seeds always come from the DERIVED policy, since seed = N would
        replay the same stream for every repetition.

        Args:
            n: Sample count
            repetitions: Number of independent trials, defaults to config

        Returns:
            {'wide': ReplicatedEstimate, 'narrow': ReplicatedEstimate}
        """
        n = validate_sample_count(n)
        repetitions = self.repetitions if repetitions is None else repetitions
        if repetitions <= 0:
            raise ValueError(f"Repetitions must be positive, got {repetitions}")

        seeds = [derive_seed(SeedPolicy.DERIVED, n, repetition=r, experiment_seed=self.experiment_seed)
                 for r in range(repetitions)]

        summary = {}
        for name, region in [('wide', self.wide_region), ('narrow', self.narrow_region)]:
            areas = np.array([self.estimator.estimate(self.circles, region, n, seed).area for seed in seeds])
            abs_errors = [absolute_error(a, self.exact_area) for a in areas]
            rel_errors = [relative_error(a, self.exact_area, self.zero_threshold) for a in areas]

            summary[name] = ReplicatedEstimate(
                n=n,
                repetitions=repetitions,
                mean_area=float(np.mean(areas)),
                std_area=float(np.std(areas, ddof=1)) if repetitions > 1 else 0.0,
                mean_absolute_error=float(np.mean(abs_errors)),
                mean_relative_error=None if None in rel_errors else float(np.mean(rel_errors)),
            )

        logger.info(f"Replicated n={n} x{repetitions}: "
                    f"wide mean={summary['wide'].mean_area:.6f}, narrow mean={summary['narrow'].mean_area:.6f}")
        return summary
