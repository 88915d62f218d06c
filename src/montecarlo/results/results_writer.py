# src/montecarlo/results/results_writer.py
"""
ResultsWriter - tabular sink for sweep records

Writes EstimateRecords as CSV with a fixed header, one row per sample
count. Undefined relative errors are written as a configurable marker.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.experiment.estimate_record import EstimateRecord

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    'N',
    'Wide_Area',
    'Wide_Relative_Error',
    'Narrow_Area',
    'Narrow_Relative_Error',
    'Wide_Absolute_Error',
    'Narrow_Absolute_Error',
]


class ResultsWriter:
    """Convert sweep records to a DataFrame and persist them"""

    def __init__(self, config: UnifiedConfig):
        self.config = config
        self._cache_config_values()

    def _cache_config_values(self):
        output_config = self.config.get_section('output')
        self.results_file = output_config['results_file']
        self.undefined_marker = output_config['undefined_marker']
        self.float_format = output_config.get('float_format')

    def to_dataframe(self, records: List[EstimateRecord]) -> pd.DataFrame:
        """DataFrame with RESULT_COLUMNS in order, one row per record"""
        df = pd.DataFrame([r.to_row() for r in records], columns=RESULT_COLUMNS)
        df['N'] = df['N'].astype('int64')
        return df

    def write_csv(self, records: List[EstimateRecord], path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write records as comma-separated text

        Args:
            records: Sweep records in output order
            path: Target file; defaults to output.results_file

        Returns:
            Path of the written file
        """
        path = Path(path or self.results_file)
        path.parent.mkdir(parents=True, exist_ok=True)

        df = self.to_dataframe(records)
        try:
            df.to_csv(path, index=False, na_rep=self.undefined_marker, float_format=self.float_format)
        except OSError as e:
            logger.error(f"Error writing results to {path}: {e}")
            raise

        logger.info(f"Results saved to {path} ({len(df)} rows)")
        return path
