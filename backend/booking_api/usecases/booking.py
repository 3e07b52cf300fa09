import logging

from ..domain.errors import (
    BookingNotFoundError,
    RoomNotFoundError,
    TicketNotEligibleError,
    UnauthorizedError,
    ValidationError,
)
from ..domain.repositories import BookingRepository, RoomRepository, TicketRepository
from ..domain.services import RoomSnapshot, TicketSnapshot, validate_ticket, validate_vacancy
from ..models import Booking, Room

logger = logging.getLogger(__name__)


class BookingService:
    """Eligibility and capacity rules for hotel room bookings.

    Runs inside the caller's transaction; the room row is locked while its occupants are counted.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        room_repo: RoomRepository,
        booking_repo: BookingRepository,
    ) -> None:
        self.ticket_repo = ticket_repo
        self.room_repo = room_repo
        self.booking_repo = booking_repo

    async def create_booking(self, *, room_id: int | None, user_id: int) -> Booking:
        if not room_id:
            raise ValidationError("roomId is required")

        ticket = await self.ticket_repo.get_by_user(user_id)
        if ticket is None:
            logger.info("booking rejected: user %s has no ticket", user_id)
            raise TicketNotEligibleError("user has no ticket")
        validate_ticket(
            TicketSnapshot(
                status=ticket.status,
                is_remote=ticket.ticket_type.is_remote,
                includes_hotel=ticket.ticket_type.includes_hotel,
            )
        )

        await self._reserve_place(room_id)
        return await self.booking_repo.create(room_id=room_id, user_id=user_id)

    async def get_user_booking(self, *, user_id: int) -> tuple[Booking, Room]:
        row = await self.booking_repo.get_by_user(user_id)
        if row is None:
            raise BookingNotFoundError("user has no booking")
        return row

    async def move_booking(self, *, room_id: int | None, booking_id: int | None, user_id: int) -> tuple[Booking, int]:
        """Move the user's booking to `room_id`. Returns the booking and the room it left."""
        if not room_id:
            raise ValidationError("roomId is required")

        row = await self.booking_repo.get_by_user(user_id)
        if row is None:
            raise BookingNotFoundError("user has no booking to move")
        existing, _ = row

        room_row = await self.room_repo.get_with_bookings_for_update(room_id)
        if room_row is None:
            raise RoomNotFoundError("room not found")
        if existing.id != booking_id:
            logger.info("booking move rejected: user %s does not own booking %s", user_id, booking_id)
            raise UnauthorizedError("booking belongs to another user")

        room, occupants = room_row
        validate_vacancy(RoomSnapshot(capacity=room.capacity, occupants=occupants))

        previous_room_id = existing.room_id
        moved = await self.booking_repo.move(existing, room_id)
        return moved, previous_room_id

    async def _reserve_place(self, room_id: int) -> Room:
        row = await self.room_repo.get_with_bookings_for_update(room_id)
        if row is None:
            raise RoomNotFoundError("room not found")
        room, occupants = row
        validate_vacancy(RoomSnapshot(capacity=room.capacity, occupants=occupants))
        return room
