"""
Configuration management package

Provides configuration classes for both the dispatcher and the simulation.
"""

from .dispatcher import (
    DispatcherConfig,
    AllocationStrategyConfig
)

from .simulation import (
    SimulationConfig,
    BuildingConfig,
    ElevatorConfig,
    DoorConfig,
    ScenarioConfig,
    ScenarioRequest
)

from .config_loader import (
    ConfigLoader,
    load_dispatcher_config,
    load_simulation_config,
    save_dispatcher_config,
    save_simulation_config
)

__all__ = [
    # Dispatcher
    'DispatcherConfig',
    'AllocationStrategyConfig',

    # Simulation
    'SimulationConfig',
    'BuildingConfig',
    'ElevatorConfig',
    'DoorConfig',
    'ScenarioConfig',
    'ScenarioRequest',

    # Loader
    'ConfigLoader',
    'load_dispatcher_config',
    'load_simulation_config',
    'save_dispatcher_config',
    'save_simulation_config',
]
