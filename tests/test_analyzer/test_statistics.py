import json

from analyzer.console_reporter import ConsoleReporter
from analyzer.statistics import Statistics
from controller.dispatcher import Dispatcher


def run_short_bank(broker, collector):
    statistics = Statistics(broker)
    statistics.start_listening()
    dispatcher = Dispatcher.create(broker, num_elevators=2, start_floor=1)
    dispatcher.start()
    dispatcher.external_request(3, "UP")
    collector.wait_for_count('door_closing', 1, 'Elevator_1')
    dispatcher.shutdown()
    dispatcher.join(timeout=5)
    return statistics


def test_statistics_records_trajectory_and_doors(broker, collector):
    statistics = run_short_bank(broker, collector)

    assert [floor for _, floor in statistics.get_trajectory('Elevator_1')] == [1, 2, 3]
    assert [floor for _, floor in statistics.get_trajectory('Elevator_2')] == [1]
    assert [(e['event'], e['floor']) for e in statistics.door_events_history['Elevator_1']] == [
        ('door_opening', 3), ('door_closing', 3)]
    assert [(a['elevator_name'], a['floor']) for a in statistics.assignment_history] == [('Elevator_1', 3)]
    assert statistics.current_elevator_states['Elevator_1']['state'] == 'SHUTDOWN'


def test_event_filters_and_incremental_reads(broker, collector):
    statistics = run_short_bank(broker, collector)

    moves = statistics.get_events(elevator_name='Elevator_1', kind='moved')
    assert [e['data']['floor'] for e in moves] == [2, 3]

    events, total = statistics.events_since(0)
    tail, same_total = statistics.events_since(total - 2)
    assert total == len(events) == same_total
    assert tail == events[-2:]


def test_save_event_log_writes_metadata_first(broker, collector, tmp_path):
    statistics = run_short_bank(broker, collector)
    statistics.set_simulation_metadata({'elevator': {'num_elevators': 2}})

    path = statistics.save_event_log(str(tmp_path / "log.jsonl"))

    lines = [json.loads(line) for line in open(path, encoding='utf-8')]
    assert lines[0]['type'] == 'metadata'
    assert lines[0]['data']['config'] == {'elevator': {'num_elevators': 2}}
    assert len(lines) - 1 == statistics.events_since()[1]
    assert {'time', 'type', 'data'} <= set(lines[1])


def test_plot_trajectory_diagram_saves_file(broker, collector, tmp_path):
    statistics = run_short_bank(broker, collector)

    output = statistics.plot_trajectory_diagram(str(tmp_path / "trajectory.png"))

    assert (tmp_path / "trajectory.png").stat().st_size > 0
    assert output.endswith("trajectory.png")


def test_stop_listening_detaches(broker):
    statistics = Statistics(broker)
    statistics.start_listening()
    statistics.stop_listening()

    broker.put('elevator/Elevator_1/moved', {'event': 'moved', 'floor': 2, 'timestamp': 0.0})

    assert statistics.events_since()[1] == 0


def test_console_reporter_lines(broker, capsys):
    reporter = ConsoleReporter(broker)
    reporter.start_listening()

    broker.put('elevator/Elevator_1/moved', {
        'timestamp': 1.2, 'event': 'moved', 'elevator_name': 'Elevator_1', 'floor': 4, 'direction': 'UP'})
    broker.put('elevator/Elevator_1/door_opening', {
        'timestamp': 1.5, 'event': 'door_opening', 'elevator_name': 'Elevator_1', 'floor': 4})
    broker.put('elevator/Elevator_1/state', {
        'timestamp': 1.5, 'event': 'state', 'elevator_name': 'Elevator_1', 'floor': 4,
        'old_state': 'MOVING_UP', 'state': 'DOORS_OPEN'})
    broker.put('elevator/Elevator_1/shutting_down', {
        'timestamp': 2.0, 'event': 'shutting_down', 'elevator_name': 'Elevator_1', 'floor': 4})

    assert capsys.readouterr().out.splitlines() == [
        "1.20 [Elevator_1] moved up to floor 4",
        "1.50 [Elevator_1] Doors opening at floor 4",
        "2.00 [Elevator_1] shutting down.",
    ]


def test_console_reporter_formats_assignments_and_states(broker):
    reporter = ConsoleReporter(broker, show_state_changes=True)

    assert reporter.format_event({
        'timestamp': 0.0, 'event': 'assigned', 'elevator_name': 'Elevator_2', 'floor': 5,
        'request': 'Request[floor=5, direction=UP, internal=False]'}) == (
        "0.00 [Dispatcher] Request[floor=5, direction=UP, internal=False] assigned to Elevator_2")
    assert reporter.format_event({
        'timestamp': 3.0, 'event': 'state', 'elevator_name': 'Elevator_2', 'floor': 5,
        'old_state': 'DOORS_OPEN', 'state': 'IDLE'}) == (
        "3.00 [Elevator_2] State: DOORS_OPEN -> IDLE at floor 5")
    assert reporter.format_event({'event': 'unknown'}) is None
