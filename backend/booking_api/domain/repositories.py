from __future__ import annotations

from typing import Protocol

from ..models import Booking, Room, Ticket


class TicketRepository(Protocol):
    async def get_by_user(self, user_id: int) -> Ticket | None: ...


class RoomRepository(Protocol):
    async def get_with_bookings_for_update(self, room_id: int) -> tuple[Room, int] | None: ...


class BookingRepository(Protocol):
    async def get_by_user(self, user_id: int) -> tuple[Booking, Room] | None: ...

    async def create(self, room_id: int, user_id: int) -> Booking: ...

    async def move(self, booking: Booking, room_id: int) -> Booking: ...
