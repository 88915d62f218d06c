# src/montecarlo/experiment/estimate_record.py
"""
EstimateRecord - one row of the accuracy sweep, plus the error metrics
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple

DEFAULT_ZERO_THRESHOLD = 1e-12


def absolute_error(estimate: float, exact: float) -> float:
    return abs(estimate - exact)


def relative_error(estimate: float, exact: float,
                   zero_threshold: float = DEFAULT_ZERO_THRESHOLD) -> Optional[float]:
    """
    |estimate - exact| / exact

    Returns:
        Relative error, or None when |exact| <= zero_threshold and the ratio
        is undefined
    """
    if abs(exact) <= zero_threshold:
        return None
    return abs(estimate - exact) / abs(exact)


@dataclass(frozen=True)
class EstimateRecord:
    """Wide and narrow region estimates for one sample count"""

    n: int
    wide_area: float
    wide_relative_error: Optional[float]
    narrow_area: float
    narrow_relative_error: Optional[float]
    wide_absolute_error: float
    narrow_absolute_error: float

    @classmethod
    def from_estimates(cls, n: int, wide_area: float, narrow_area: float, exact: float,
                       zero_threshold: float = DEFAULT_ZERO_THRESHOLD) -> 'EstimateRecord':
        return cls(
            n=n,
            wide_area=wide_area,
            wide_relative_error=relative_error(wide_area, exact, zero_threshold),
            narrow_area=narrow_area,
            narrow_relative_error=relative_error(narrow_area, exact, zero_threshold),
            wide_absolute_error=absolute_error(wide_area, exact),
            narrow_absolute_error=absolute_error(narrow_area, exact),
        )

    def to_row(self) -> Tuple:
        """Values in output column order"""
        return (
            self.n,
            self.wide_area,
            self.wide_relative_error,
            self.narrow_area,
            self.narrow_relative_error,
            self.wide_absolute_error,
            self.narrow_absolute_error,
        )

    def to_dict(self) -> Dict:
        return asdict(self)
