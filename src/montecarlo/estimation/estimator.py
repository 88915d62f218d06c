# src/montecarlo/estimation/estimator.py
"""
Monte Carlo area estimator

Draws N uniform points over a bounding region, counts the ones inside every
circle and scales the hit ratio by the region area.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Sequence

from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.geometry.primitives import (
    Circle,
    Region,
    point_in_intersection,
    points_in_intersection,
)
from src.montecarlo.sampling.sampler import UniformSampler, validate_sample_count

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AreaEstimate:
    """Outcome of a single estimation call"""

    area: float
    inside_count: int
    n_samples: int
    region_area: float
    seed: int

    @property
    def hit_rate(self) -> float:
        """Observed fraction of samples inside the intersection"""
        return self.inside_count / self.n_samples

    @property
    def standard_error(self) -> float:
        """Binomial standard error of the area estimate"""
        p = self.hit_rate
        return self.region_area * math.sqrt(p * (1.0 - p) / self.n_samples)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['hit_rate'] = self.hit_rate
        data['standard_error'] = self.standard_error
        return data


def count_inside(circles: Sequence[Circle], region: Region, n: int, seed: int,
                 vectorized: bool = True) -> int:
    """
    Number of n seeded samples over region that fall inside every circle

    Both paths consume the same stream and apply the same comparison, so
    they return the same count.
    """
    sampler = UniformSampler(region, seed)
    if vectorized:
        return int(points_in_intersection(sampler.sample(n), circles).sum())

    points_inside = 0
    for point in sampler.points(n):
        if point_in_intersection(point, circles):
            points_inside += 1
    return points_inside


def estimate_area(circles: Sequence[Circle], region: Region, n: int, seed: int) -> float:
    """
    Estimate the intersection area of circles restricted to region

    Args:
        circles: Circles whose common area is estimated
        region: Sampling domain; must contain the whole intersection for an
            unbiased estimate
        n: Number of samples, positive integer
        seed: Random seed of the sampler

    Returns:
        (inside_count / n) * region.area(), between 0 and region.area()

    Raises:
        InvalidSampleCountError: If n is not a positive integer
    """
    n = validate_sample_count(n)
    inside_count = count_inside(circles, region, n, seed)
    return (inside_count / n) * region.area()


class MonteCarloEstimator:
    """
    Configured estimator producing detailed AreaEstimate results

    Example:
        estimator = MonteCarloEstimator(config)
        result = estimator.estimate(DEFAULT_CIRCLES, WIDE_REGION, 10000, seed=42)
        # result.area, result.standard_error, result.hit_rate
    """

    def __init__(self, config: Optional[UnifiedConfig] = None):
        self.config = config
        self._cache_config_values()

    def _cache_config_values(self):
        """Cache estimation configuration values"""
        if self.config is None:
            self.vectorized = True
            return

        estimation_config = self.config.get_section('estimation')
        self.vectorized = bool(estimation_config['vectorized'])

    def estimate(self, circles: Sequence[Circle], region: Region, n: int, seed: int) -> AreaEstimate:
        """
        Estimate the intersection area and keep the counts behind it

        Raises:
            InvalidSampleCountError: If n is not a positive integer
        """
        n = validate_sample_count(n)
        inside_count = count_inside(circles, region, n, seed, vectorized=self.vectorized)
        region_area = region.area()

        result = AreaEstimate(
            area=(inside_count / n) * region_area,
            inside_count=inside_count,
            n_samples=n,
            region_area=region_area,
            seed=seed,
        )
        logger.debug(f"Estimate n={n} seed={seed}: area={result.area:.6f} hits={inside_count}")
        return result
