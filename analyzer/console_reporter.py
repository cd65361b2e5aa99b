from simulator.core import events


class ConsoleReporter:
    """
    Prints the event stream as one console line per event.

    Lines use the "{time} [Tag] message" layout of the rest of the tooling,
    e.g. "1.60 [Elevator_1] Doors opening at floor 5".
    """
    def __init__(self, broker, show_state_changes=False):
        self.broker = broker
        self.show_state_changes = show_state_changes

    def start_listening(self):
        self.broker.subscribe_all(self.report)

    def stop_listening(self):
        self.broker.unsubscribe(self.report)

    def report(self, topic, message):
        line = self.format_event(message)
        if line is not None:
            print(line)

    def format_event(self, message):
        kind = message.get('event')
        name = message.get('elevator_name')
        floor = message.get('floor')
        timestamp = message.get('timestamp') or 0.0

        if kind == events.ASSIGNED:
            text = f"[Dispatcher] {message.get('request')} assigned to {name}"
        elif kind == events.MOVED:
            way = 'up' if message.get('direction') == 'UP' else 'down'
            text = f"[{name}] moved {way} to floor {floor}"
        elif kind == events.DOOR_OPENING:
            text = f"[{name}] Doors opening at floor {floor}"
        elif kind == events.DOOR_CLOSING:
            text = f"[{name}] Doors closing at floor {floor}"
        elif kind == events.SHUTTING_DOWN:
            text = f"[{name}] shutting down."
        elif kind == events.STATE and self.show_state_changes:
            text = f"[{name}] State: {message.get('old_state')} -> {message.get('state')} at floor {floor}"
        else:
            return None
        return f"{timestamp:.2f} {text}"
