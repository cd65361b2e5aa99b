"""
Configuration loader utility

Loads DispatcherConfig and SimulationConfig from YAML files.
A single scenario file may carry both a `simulation` and a `dispatcher` section.
"""

import yaml
from pathlib import Path
from typing import Union

from .dispatcher import DispatcherConfig
from .simulation import SimulationConfig


class ConfigLoader:
    """Utility class for loading configuration files"""

    @staticmethod
    def _read(file_path: Union[str, Path]) -> dict:
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {file_path}")
        return data

    @staticmethod
    def _write(data: dict, file_path: Union[str, Path]):
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    @staticmethod
    def load_dispatcher(file_path: Union[str, Path]) -> DispatcherConfig:
        """
        Load DispatcherConfig from YAML file

        Args:
            file_path: Path to YAML file

        Returns:
            DispatcherConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        data = ConfigLoader._read(file_path)

        config = DispatcherConfig.from_dict(data)
        config.validate()

        return config

    @staticmethod
    def load_simulation(file_path: Union[str, Path]) -> SimulationConfig:
        """
        Load SimulationConfig from YAML file

        Args:
            file_path: Path to YAML file

        Returns:
            SimulationConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        data = ConfigLoader._read(file_path)

        config = SimulationConfig.from_dict(data)
        config.validate()

        return config

    @staticmethod
    def save_dispatcher(config: DispatcherConfig, file_path: Union[str, Path]):
        """Save DispatcherConfig to YAML file"""
        ConfigLoader._write(config.to_dict(), file_path)

    @staticmethod
    def save_simulation(config: SimulationConfig, file_path: Union[str, Path]):
        """Save SimulationConfig to YAML file"""
        ConfigLoader._write(config.to_dict(), file_path)


# Convenience functions
def load_dispatcher_config(file_path: Union[str, Path]) -> DispatcherConfig:
    """Load DispatcherConfig from YAML file"""
    return ConfigLoader.load_dispatcher(file_path)


def load_simulation_config(file_path: Union[str, Path]) -> SimulationConfig:
    """Load SimulationConfig from YAML file"""
    return ConfigLoader.load_simulation(file_path)


def save_dispatcher_config(config: DispatcherConfig, file_path: Union[str, Path]):
    """Save DispatcherConfig to YAML file"""
    ConfigLoader.save_dispatcher(config, file_path)


def save_simulation_config(config: SimulationConfig, file_path: Union[str, Path]):
    """Save SimulationConfig to YAML file"""
    ConfigLoader.save_simulation(config, file_path)
