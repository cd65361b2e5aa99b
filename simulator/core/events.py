"""Event kinds published on the message broker."""

ASSIGNED = "assigned"
MOVED = "moved"
DOOR_OPENING = "door_opening"
DOOR_CLOSING = "door_closing"
STATE = "state"
SHUTTING_DOWN = "shutting_down"

ASSIGNMENT_TOPIC = f"dispatcher/{ASSIGNED}"


def elevator_topic(elevator_name: str, kind: str) -> str:
    return f"elevator/{elevator_name}/{kind}"
