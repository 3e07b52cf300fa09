from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user_id, get_session
from ..domain.errors import (
    NoVacanciesAvailableError,
    NotFoundError,
    TicketNotEligibleError,
    UnauthorizedError,
    ValidationError,
)
from ..infrastructure.repositories import (
    SqlAlchemyBookingRepository,
    SqlAlchemyRoomRepository,
    SqlAlchemyTicketRepository,
)
from ..domain.services import coerce_identifier
from ..schemas import BookingIdRead, BookingRead, BookingWrite
from ..usecases.booking import BookingService
from ..utils.audit_log import emit_audit_log

router = APIRouter(prefix="/booking", tags=["booking"], dependencies=[Depends(get_current_user_id)])


def _service(session: AsyncSession) -> BookingService:
    return BookingService(
        SqlAlchemyTicketRepository(session),
        SqlAlchemyRoomRepository(session),
        SqlAlchemyBookingRepository(session),
    )


def _audit_failed() -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")


@router.post("", response_model=BookingIdRead, status_code=status.HTTP_200_OK)
async def create_booking(
    payload: BookingWrite,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> BookingIdRead:
    service = _service(session)
    async with session.begin():
        try:
            booking = await service.create_booking(room_id=payload.room_id, user_id=user_id)
        except NotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="room not found")
        except NoVacanciesAvailableError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="no vacancies available")
        except TicketNotEligibleError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="ticket does not allow lodging")
        except ValidationError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="roomId is required")

    try:
        emit_audit_log(
            action="booking.created",
            initiator="user",
            booking_id=booking.id,
            room_id=booking.room_id,
            user_id=user_id,
        )
    except RuntimeError as exc:
        raise _audit_failed() from exc
    return BookingIdRead(booking_id=booking.id)


@router.get("", response_model=BookingRead)
async def get_my_booking(
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> BookingRead:
    service = _service(session)
    try:
        booking, room = await service.get_user_booking(user_id=user_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="booking not found")
    return BookingRead.from_db(booking=booking, room=room)


@router.put("/{booking_id}", response_model=BookingIdRead)
async def move_booking(
    payload: BookingWrite,
    booking_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> BookingIdRead:
    service = _service(session)
    async with session.begin():
        try:
            moved, previous_room_id = await service.move_booking(
                room_id=payload.room_id,
                booking_id=coerce_identifier(booking_id),
                user_id=user_id,
            )
        except UnauthorizedError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="booking belongs to another user")
        except NotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="room or booking not found")
        except NoVacanciesAvailableError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="no vacancies available")
        except ValidationError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="roomId is required")

    try:
        emit_audit_log(
            action="booking.moved",
            initiator="user",
            booking_id=moved.id,
            room_id=moved.room_id,
            user_id=user_id,
            extra={"room_id_from": previous_room_id},
        )
    except RuntimeError as exc:
        raise _audit_failed() from exc
    return BookingIdRead(booking_id=moved.id)
