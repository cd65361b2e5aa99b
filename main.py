import sys

# Configuration
from config import DispatcherConfig, SimulationConfig, load_dispatcher_config, load_simulation_config

# Simulator components
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeClock

# Controller and allocation strategy
from controller.dispatcher import Dispatcher
from controller.algorithms import create_allocation_strategy

# Analyzer
from analyzer.statistics import Statistics
from analyzer.console_reporter import ConsoleReporter

DEFAULT_SCENARIO = "scenarios/demo.yaml"
SHUTDOWN_TIMEOUT = 5.0  # real seconds to wait for elevator threads


def build_simulation(sim_config: SimulationConfig, dispatcher_config: DispatcherConfig,
                     clock: RealtimeClock = None, console: bool = True):
    """
    Wire broker, recorder and elevator bank together (threads not started yet)

    Returns:
        (dispatcher, statistics)
    """
    if clock is None:
        clock = RealtimeClock(speed_factor=sim_config.realtime_factor)
    broker = MessageBroker(clock, verbose=sim_config.verbose)

    # Subscribers first, so the elevators' initial state reports are captured
    statistics = Statistics(broker)
    statistics.start_listening()
    statistics.set_simulation_metadata(sim_config.to_dict()['simulation'])
    if console:
        ConsoleReporter(broker).start_listening()

    strategy_config = dispatcher_config.allocation_strategy
    parameters = dict(strategy_config.parameters)
    if strategy_config.name == "NearestCar":
        parameters.setdefault('num_floors', sim_config.building.num_floors)
    strategy = create_allocation_strategy(strategy_config.name, **parameters)

    dispatcher = Dispatcher.create(
        broker,
        num_elevators=sim_config.elevator.num_elevators,
        start_floor=sim_config.elevator.start_floor,
        start_floors=sim_config.elevator.start_floors,
        clock=clock,
        floor_travel_time=sim_config.elevator.floor_travel_time,
        dwell_time=sim_config.door.dwell_time,
        service_policy=sim_config.elevator.service_policy,
        strategy=strategy,
        atomic_assignment=dispatcher_config.atomic_assignment,
    )
    if console:
        print(f"{clock.now():.2f} [Dispatcher] Using strategy: {strategy.get_strategy_name()}")
    return dispatcher, statistics


def run_scenario(dispatcher: Dispatcher, scenario, clock: RealtimeClock):
    """Issue the scripted requests on their timers, then let the bank run out the duration"""
    start = clock.now()
    for request in scenario.requests:
        clock.sleep(request.at - (clock.now() - start))
        dispatcher.submit(request.to_request())
    clock.sleep(scenario.duration - (clock.now() - start))


def run_simulation(sim_config_path=DEFAULT_SCENARIO, dispatcher_config_path=None,
                   clock: RealtimeClock = None, console: bool = True):
    """
    Set up and run the entire simulation

    Args:
        sim_config_path: Path to simulation configuration YAML file
        dispatcher_config_path: Path to dispatcher configuration YAML file
            (defaults to the `dispatcher` section of the simulation file)
    """
    print("--- Loading Configuration ---")
    sim_config = load_simulation_config(sim_config_path)
    dispatcher_config = load_dispatcher_config(dispatcher_config_path or sim_config_path)
    print(f"Simulation Config: {sim_config_path}")

    if clock is None:
        clock = RealtimeClock(speed_factor=sim_config.realtime_factor)

    print("\n--- Simulation Setup ---")
    dispatcher, statistics = build_simulation(sim_config, dispatcher_config, clock=clock, console=console)
    print(f"{len(dispatcher.elevators)} elevators, {len(sim_config.scenario.requests)} scripted requests")

    print("\n--- Simulation Start ---")
    dispatcher.start()
    try:
        run_scenario(dispatcher, sim_config.scenario, clock)
    finally:
        dispatcher.shutdown()
        if not dispatcher.join(timeout=SHUTDOWN_TIMEOUT):
            print(f"Warning: elevator threads still running after {SHUTDOWN_TIMEOUT}s")

    print("\n--- Simulation End ---")
    for snapshot in dispatcher.status():
        print(f"{snapshot.name}: floor {snapshot.current_floor}, {snapshot.state}")

    if sim_config.event_log:
        statistics.save_event_log(sim_config.event_log)
    if sim_config.plot:
        statistics.plot_trajectory_diagram()

    return statistics


def main(argv=None):
    # Accept command line arguments for config files
    argv = sys.argv[1:] if argv is None else argv
    sim_config_path = argv[0] if len(argv) > 0 else DEFAULT_SCENARIO
    dispatcher_config_path = argv[1] if len(argv) > 1 else None
    run_simulation(sim_config_path=sim_config_path, dispatcher_config_path=dispatcher_config_path)


if __name__ == '__main__':
    main()
