"""Appointment status lifecycle.

Doctors triage a booking along a small set of edges::

    pending -> approved | held | rejected
    held    -> approved | rejected

``approved`` and ``rejected`` accept no further doctor action. ``completed``
and ``cancelled`` are valid stored values without any inbound edge.
"""
from ..models.appointment import APPROVED, HELD, PENDING, REJECTED

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({APPROVED, HELD, REJECTED}),
    HELD: frozenset({APPROVED, REJECTED}),
}


class InvalidTransition(ValueError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move appointment from '{current}' to '{requested}'")


def allowed_next(current: str) -> frozenset[str]:
    return ALLOWED_TRANSITIONS.get(current, frozenset())


def can_transition(current: str, requested: str) -> bool:
    return requested in allowed_next(current)


def check_transition(current: str, requested: str) -> str:
    """Return ``requested`` if the edge is legal, otherwise raise InvalidTransition."""
    if not can_transition(current, requested):
        raise InvalidTransition(current, requested)
    return requested
