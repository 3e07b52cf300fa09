from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .domain.services import coerce_identifier
from .models import Booking, Room


class BookingWrite(BaseModel):
    """Body of POST /booking and PUT /booking/{bookingId}."""

    model_config = ConfigDict(populate_by_name=True)

    # Missing or non-numeric roomId becomes None and is rejected by the service.
    room_id: Optional[int] = Field(default=None, alias="roomId")

    @field_validator("room_id", mode="before")
    @classmethod
    def _coerce_room_id(cls, value: object) -> Optional[int]:
        return coerce_identifier(value)


class BookingIdRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_id: int = Field(alias="bookingId")


class RoomRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    capacity: int
    hotel_id: int = Field(alias="hotelId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_serializer("created_at", "updated_at")
    def _ser_datetime(self, dt: datetime) -> str:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @classmethod
    def from_db(cls, *, room: Room) -> "RoomRead":
        return cls(
            id=room.id,
            name=room.name,
            capacity=room.capacity,
            hotel_id=room.hotel_id,
            created_at=room.created_at,
            updated_at=room.updated_at,
        )


class BookingRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    room: RoomRead = Field(alias="Room")

    @classmethod
    def from_db(cls, *, booking: Booking, room: Room) -> "BookingRead":
        return cls(id=booking.id, room=RoomRead.from_db(room=room))
