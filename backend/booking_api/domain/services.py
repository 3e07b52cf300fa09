from dataclasses import dataclass

from ..models import TicketStatus
from .errors import NoVacanciesAvailableError, TicketNotEligibleError


@dataclass(frozen=True)
class TicketSnapshot:
    status: TicketStatus
    is_remote: bool
    includes_hotel: bool


@dataclass(frozen=True)
class RoomSnapshot:
    capacity: int
    occupants: int


def validate_ticket(snapshot: TicketSnapshot) -> None:
    """
    Pure validation: a ticket grants lodging only when it is paid, in person and includes hotel.
    Raises TicketNotEligibleError otherwise.
    """
    if snapshot.is_remote:
        raise TicketNotEligibleError("remote tickets do not include lodging")
    if snapshot.status != TicketStatus.PAID:
        raise TicketNotEligibleError("ticket is not paid")
    if not snapshot.includes_hotel:
        raise TicketNotEligibleError("ticket type does not include hotel")


def validate_vacancy(snapshot: RoomSnapshot) -> int:
    """Return remaining places after one more booking, or raise NoVacanciesAvailableError."""
    remaining = snapshot.capacity - snapshot.occupants
    if remaining <= 0:
        raise NoVacanciesAvailableError("room is full")
    return remaining - 1


def coerce_identifier(value: object) -> int | None:
    """Coerce a transport identifier ("12", 12, 12.0) to int; None when it is not a whole number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
