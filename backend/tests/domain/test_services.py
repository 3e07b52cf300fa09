import pytest
from booking_api.domain.errors import NoVacanciesAvailableError, TicketNotEligibleError
from booking_api.domain.services import (
    RoomSnapshot,
    TicketSnapshot,
    coerce_identifier,
    validate_ticket,
    validate_vacancy,
)
from booking_api.models import TicketStatus


def test_accepts_paid_in_person_ticket_with_hotel() -> None:
    snap = TicketSnapshot(status=TicketStatus.PAID, is_remote=False, includes_hotel=True)
    validate_ticket(snap)


def test_rejects_remote_ticket() -> None:
    snap = TicketSnapshot(status=TicketStatus.PAID, is_remote=True, includes_hotel=True)
    with pytest.raises(TicketNotEligibleError):
        validate_ticket(snap)


def test_rejects_unpaid_ticket() -> None:
    snap = TicketSnapshot(status=TicketStatus.RESERVED, is_remote=False, includes_hotel=True)
    with pytest.raises(TicketNotEligibleError):
        validate_ticket(snap)


def test_rejects_ticket_without_hotel() -> None:
    snap = TicketSnapshot(status=TicketStatus.PAID, is_remote=False, includes_hotel=False)
    with pytest.raises(TicketNotEligibleError):
        validate_ticket(snap)


def test_rejects_when_room_is_full() -> None:
    with pytest.raises(NoVacanciesAvailableError):
        validate_vacancy(RoomSnapshot(capacity=2, occupants=2))


def test_rejects_when_room_is_over_capacity() -> None:
    with pytest.raises(NoVacanciesAvailableError):
        validate_vacancy(RoomSnapshot(capacity=1, occupants=3))


def test_accepts_when_room_has_place() -> None:
    remaining_after = validate_vacancy(RoomSnapshot(capacity=3, occupants=1))
    assert remaining_after == 1


@pytest.mark.parametrize(
    "value,expected",
    [
        (12, 12),
        ("12", 12),
        (" 12 ", 12),
        (12.0, 12),
        (1.5, None),
        ("abc", None),
        ("", None),
        (True, None),
        (None, None),
        ([1], None),
    ],
)
def test_coerce_identifier(value: object, expected: int | None) -> None:
    assert coerce_identifier(value) == expected
