"""
Unified Configuration System
Loads and manages experiment configuration from multiple JSON files
Geometry, sweep range, seeding and output settings all live in config
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class UnifiedConfig:
    """
    Unified configuration system that loads from multiple JSON files and provides
    structured access to all configuration parameters
    """

    # Load order: base files first, environment overrides last
    CONFIG_FILES = [
        "base.json",
        "geometry.json",
        "experiment.json",
        "output.json"
    ]

    def __init__(self, config_path: Optional[str] = None, environment: str = "prod"):
        """
        Initialize UnifiedConfig with automatic path detection

        Args:
            config_path: Optional path to config file/directory. If None, auto-detects.
            environment: Environment to load (dev/prod/test). Default is "prod".
        """
        self.environment = environment
        self.config_path = config_path or self._find_config_path()

        if os.path.isfile(self.config_path):
            self.config = self._load_single_config()
            self.multi_file_mode = False
        else:
            self.config = self._load_multi_file_config()
            self.multi_file_mode = True

        self._cache_config_sections()

    def _find_config_path(self) -> str:
        """
        Auto-detect config directory relative to project root
        """
        current_path = Path(__file__).resolve()

        for parent in [current_path.parent] + list(current_path.parents):
            config_dir = parent / "config"
            if config_dir.is_dir() and (config_dir / "base.json").exists():
                return str(config_dir)

        for path in ["config", "../config", "../../config"]:
            if os.path.exists(os.path.join(path, "base.json")):
                return path

        raise FileNotFoundError(
            "Could not find config directory with base.json. "
            "Please ensure config files exist in a 'config' directory."
        )

    def _load_single_config(self) -> Dict[str, Any]:
        """
        Load configuration from a single JSON file
        """
        try:
            with open(self.config_path, 'r') as f:
                config = json.load(f)

            logger.info(f"Loaded single-file configuration from: {self.config_path}")
            return config

        except FileNotFoundError:
            logger.error(f"Configuration file not found: {self.config_path}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file: {e}")
            raise

    def _load_multi_file_config(self) -> Dict[str, Any]:
        """
        Load configuration from multiple JSON files and merge them
        """
        config_dir = Path(self.config_path)
        merged_config = {}

        for config_file in self.CONFIG_FILES:
            file_path = config_dir / config_file
            if file_path.exists():
                merged_config = self._merge_file(merged_config, file_path)
                logger.debug(f"Loaded config from: {file_path}")
            else:
                logger.warning(f"Config file not found: {file_path}")

        env_file = config_dir / "environments" / f"{self.environment}.json"
        if env_file.exists():
            merged_config = self._merge_file(merged_config, env_file)
            logger.info(f"Applied {self.environment} environment overrides from: {env_file}")
        else:
            logger.info(f"No environment config found for: {self.environment}")

        if not merged_config:
            raise FileNotFoundError(
                f"No configuration files found in directory: {config_dir}"
            )

        logger.info(f"Loaded multi-file configuration from: {config_dir} (environment: {self.environment})")
        return merged_config

    def _merge_file(self, merged_config: Dict, file_path: Path) -> Dict:
        try:
            with open(file_path, 'r') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {file_path}: {e}")
            raise
        self._deep_update(merged_config, file_config)
        return merged_config

    def _deep_update(self, base_dict: Dict, update_dict: Dict):
        """
        Deep update nested dictionary
        """
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value

    def _cache_config_sections(self):
        """
        Cache frequently accessed configuration sections
        """
        self.general = self.config.get('general', {})
        self.geometry = self.config.get('geometry', {})
        self.experiment = self.config.get('experiment', {})
        self.estimation = self.config.get('estimation', {})
        self.output = self.config.get('output', {})
        self.logging = self.config.get('logging', {})

    # ========================================
    # SECTION ACCESS METHODS
    # ========================================

    def get_section(self, section_name: str, default: Any = None) -> Any:
        """
        Get a configuration section by name

        Args:
            section_name: Name of the configuration section
            default: Default value if section not found

        Returns:
            Configuration section or default value
        """
        return self.config.get(section_name, default)

    def update_config(self, updates: Dict[str, Any]):
        """
        Update configuration with new values

        Args:
            updates: Dictionary of configuration updates
        """
        self._deep_update(self.config, updates)
        self._cache_config_sections()

    def save_config(self, filepath: Optional[str] = None):
        """
        Save current configuration to file

        Args:
            filepath: Optional path to save to. If None, uses current config_path.
        """
        if self.multi_file_mode:
            save_path = filepath or str(Path(self.config_path) / f"combined_config_{self.environment}.json")
        else:
            save_path = filepath or self.config_path

        with open(save_path, 'w') as f:
            json.dump(self.config, f, indent=self.output.get('json_indent', 2))

        logger.info(f"Configuration saved to: {save_path}")
        return save_path

    def get_config_info(self) -> Dict[str, Any]:
        """
        Get information about the current configuration setup
        """
        return {
            'config_path': self.config_path,
            'multi_file_mode': self.multi_file_mode,
            'environment': self.environment,
            'sections_loaded': list(self.config.keys()),
            'total_sections': len(self.config)
        }

    def validate_config(self) -> Dict[str, list]:
        """
        Validate configuration and return any issues found

        Returns:
            Dictionary with validation results
        """
        issues = {
            'missing_sections': [],
            'invalid_values': [],
            'warnings': []
        }

        required_sections = ['general', 'geometry', 'experiment', 'estimation', 'output']
        for section in required_sections:
            if section not in self.config:
                issues['missing_sections'].append(section)

        if self.general.get('experiment_seed') is None:
            issues['warnings'].append("No experiment_seed set - derived seed policy is not reproducible")

        circles = self.geometry.get('circles')
        if not circles:
            issues['missing_sections'].append("geometry.circles must list at least one circle")

        regions = self.geometry.get('regions', {})
        for region_name in ['wide', 'narrow']:
            if region_name not in regions:
                issues['missing_sections'].append(f"geometry.regions.{region_name} is required")

        sweep = self.experiment.get('sweep', {})
        for param in ['start', 'stop', 'step']:
            if sweep.get(param) is None:
                issues['missing_sections'].append(f"experiment.sweep.{param} is required")

        seed_policy = self.experiment.get('seed_policy')
        if seed_policy not in ['sample_count', 'derived']:
            issues['invalid_values'].append(f"Invalid seed policy: {seed_policy}")

        return issues

    def __repr__(self) -> str:
        """String representation of the config"""
        mode = "multi-file" if self.multi_file_mode else "single-file"
        return f"UnifiedConfig(config_path='{self.config_path}', mode='{mode}', environment='{self.environment}', sections={len(self.config)})"
