from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Tuple, cast

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..domain.repositories import BookingRepository, RoomRepository, TicketRepository
from ..models import Booking, Enrollment, Room, Ticket


class SqlAlchemyTicketRepository(TicketRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user(self, user_id: int) -> Ticket | None:
        stmt = (
            select(Ticket)
            .join(Enrollment, Ticket.enrollment_id == Enrollment.id)
            .options(joinedload(Ticket.ticket_type))
            .where(Enrollment.user_id == user_id)
        )
        result = await self.session.scalar(stmt)
        return result if isinstance(result, Ticket) else None


class SqlAlchemyRoomRepository(RoomRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_with_bookings_for_update(self, room_id: int) -> Optional[Tuple[Room, int]]:
        room = await self.session.scalar(select(Room).where(Room.id == room_id).with_for_update())
        if not isinstance(room, Room):
            return None
        occupants = await self.session.scalar(select(func.count(Booking.id)).where(Booking.room_id == room_id))
        return room, int(occupants or 0)


class SqlAlchemyBookingRepository(BookingRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user(self, user_id: int) -> Optional[Tuple[Booking, Room]]:
        stmt: Select[Tuple[Booking, Room]] = (
            select(Booking, Room)
            .join(Room, Booking.room_id == Room.id)
            .where(Booking.user_id == user_id)
            .order_by(Booking.id)
        )
        row = (await self.session.execute(stmt)).first()
        return cast(Optional[Tuple[Booking, Room]], row)

    async def create(self, room_id: int, user_id: int) -> Booking:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        booking = Booking(
            room_id=room_id,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def move(self, booking: Booking, room_id: int) -> Booking:
        booking.room_id = room_id
        booking.updated_at = datetime.now(timezone.utc).replace(tzinfo=None)
        self.session.add(booking)
        await self.session.flush()
        return booking
