# src/montecarlo/run_experiment.py
# Main script: runs the accuracy sweep and saves the results table
# Usage: python -m src.montecarlo.run_experiment [output.csv] [--env ENV] [--config DIR]

import logging
import sys
from typing import List, Optional

from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.experiment.convergence import ConvergenceAnalyzer
from src.montecarlo.experiment.experiment_driver import ExperimentDriver
from src.montecarlo.results.results_writer import ResultsWriter

logger = logging.getLogger(__name__)


def parse_arguments(argv: List[str]) -> dict:
    """Parse [output.csv] [--env ENV] [--config DIR] from an argv list (program name excluded)"""
    options = {'output': None, 'environment': 'prod', 'config_path': None}

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--env" and i + 1 < len(argv):
            options['environment'] = argv[i + 1]
            i += 2
        elif arg == "--config" and i + 1 < len(argv):
            options['config_path'] = argv[i + 1]
            i += 2
        elif arg.startswith("--"):
            raise ValueError(f"Unknown or incomplete option: {arg}")
        else:
            options['output'] = arg
            i += 1

    return options


def setup_logging(config: UnifiedConfig):
    logging_config = config.get_section('logging', {})
    logging.basicConfig(
        level=getattr(logging, logging_config.get('level', 'INFO').upper()),
        format=logging_config.get('format', '%(name)s - %(levelname)s - %(message)s'),
    )


def log_convergence_summary(report: dict):
    for region in ('wide', 'narrow'):
        stats = report[region]
        logger.info(f"{region}: final relative error={stats['final_relative_error']}, "
                    f"tail mean={stats['tail_mean_relative_error']}, log-log slope={stats['slope']}")
    logger.info(f"Faster converging region: {report['faster_region']}")


def main(argv: Optional[List[str]] = None) -> int:
    options = parse_arguments(sys.argv[1:] if argv is None else argv)

    config = UnifiedConfig(config_path=options['config_path'], environment=options['environment'])
    setup_logging(config)

    driver = ExperimentDriver(config)
    records = driver.run_sweep()

    report = ConvergenceAnalyzer(config).analyze(records)
    if report:
        log_convergence_summary(report)

    output_path = ResultsWriter(config).write_csv(records, options['output'])
    logger.info(f"Experiment finished. Results saved to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
