class BookingError(Exception):
    """Base class for booking domain rejections."""


class ValidationError(BookingError):
    pass


class TicketNotEligibleError(BookingError):
    pass


class NotFoundError(BookingError):
    pass


class RoomNotFoundError(NotFoundError):
    pass


class BookingNotFoundError(NotFoundError):
    pass


class NoVacanciesAvailableError(BookingError):
    pass


class UnauthorizedError(BookingError):
    pass
