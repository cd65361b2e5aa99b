#!/usr/bin/env python3
"""
HTTP Server for the elevator bank
Exposes the dispatcher's submission interface and the recorded event stream
"""
import sys
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

from simulator.core.request import Direction


def _int_field(data, key):
    value = data.get(key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def create_app(dispatcher, statistics=None):
    """
    Build the Flask app around a running (or not yet started) dispatcher.

    Args:
        dispatcher: Dispatcher receiving the requests
        statistics: Optional Statistics recorder backing /api/events
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    @app.route('/api/status')
    def status():
        """Server status endpoint"""
        return jsonify({
            'status': 'ok',
            'server': 'Elevator Bank HTTP Server',
            'version': '1.0',
            'elevators': len(dispatcher.elevators),
            'strategy': dispatcher.strategy.get_strategy_name()
        })

    @app.route('/api/elevators')
    def elevators():
        """Snapshot of every elevator"""
        return jsonify([snapshot.to_dict() for snapshot in dispatcher.status()])

    @app.route('/api/requests/external', methods=['POST'])
    def external_request():
        """
        Hall call
        Body: {"floor": int, "direction": "UP" | "DOWN"}
        """
        data = request.get_json(silent=True) or {}
        floor = _int_field(data, 'floor')
        if floor is None:
            return jsonify({'error': "'floor' must be an integer"}), 400
        try:
            direction = Direction.parse(data.get('direction'))
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        if direction is Direction.IDLE:
            return jsonify({'error': "'direction' must be UP or DOWN"}), 400

        elevator_id = dispatcher.external_request(floor, direction)
        return jsonify({'assigned_elevator': elevator_id, 'floor': floor,
                        'direction': direction.value}), 202

    @app.route('/api/requests/internal', methods=['POST'])
    def internal_request():
        """
        Car call
        Body: {"elevator_id": int, "floor": int}
        """
        data = request.get_json(silent=True) or {}
        elevator_id = _int_field(data, 'elevator_id')
        floor = _int_field(data, 'floor')
        if elevator_id is None or floor is None:
            return jsonify({'error': "'elevator_id' and 'floor' must be integers"}), 400
        try:
            dispatcher.internal_request(elevator_id, floor)
        except IndexError as e:
            return jsonify({'error': str(e)}), 404
        return jsonify({'elevator_id': elevator_id, 'floor': floor}), 202

    @app.route('/api/shutdown', methods=['POST'])
    def shutdown():
        """Signal every elevator to stop (does not wait)"""
        dispatcher.shutdown()
        return jsonify({'status': 'shutting_down'}), 202

    @app.route('/api/events')
    def stream_events():
        """
        Recorded events from a specific index (for live mode)
        Query params:
            - from: starting event index (default: 0)
        """
        if statistics is None:
            return jsonify({'error': 'Event recording is not enabled'}), 404
        try:
            from_index = max(0, int(request.args.get('from', 0)))
        except ValueError:
            return jsonify({'error': "'from' must be an integer"}), 400

        events, total = statistics.events_since(from_index)
        return jsonify({
            'events': events,
            'total': total,
            'from': from_index,
            'returned_count': len(events)
        })

    return app


def run_server(app, host='localhost', port=5000, debug=False):
    """Run the Flask server"""
    print(f"Starting HTTP server on http://{host}:{port}")
    print(f"API endpoints:")
    print(f"  - GET  /api/status")
    print(f"  - GET  /api/elevators")
    print(f"  - POST /api/requests/external")
    print(f"  - POST /api/requests/internal")
    print(f"  - POST /api/shutdown")
    print(f"  - GET  /api/events?from=<index>")

    # The reloader would start a second copy of every elevator thread
    app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)


def main(argv=None):
    """Start the bank from a scenario file and serve it; scripted requests run in the background"""
    from main import DEFAULT_SCENARIO, build_simulation, run_scenario
    from config import load_dispatcher_config, load_simulation_config
    from simulator.infrastructure.realtime_env import RealtimeClock

    argv = sys.argv[1:] if argv is None else argv
    sim_config_path = argv[0] if len(argv) > 0 else DEFAULT_SCENARIO
    port = int(argv[1]) if len(argv) > 1 else 5000

    sim_config = load_simulation_config(sim_config_path)
    dispatcher_config = load_dispatcher_config(sim_config_path)
    clock = RealtimeClock(speed_factor=sim_config.realtime_factor)
    dispatcher, statistics = build_simulation(sim_config, dispatcher_config, clock=clock)

    dispatcher.start()
    threading.Thread(target=run_scenario, args=(dispatcher, sim_config.scenario, clock),
                     name="Scenario", daemon=True).start()
    try:
        run_server(create_app(dispatcher, statistics), port=port)
    finally:
        dispatcher.shutdown()
        dispatcher.join(timeout=5.0)
        if sim_config.event_log:
            statistics.save_event_log(sim_config.event_log)


if __name__ == '__main__':
    main()
