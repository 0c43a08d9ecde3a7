"""
Domain errors raised by the society services.

Every error carries a human readable message; the request layer turns them into
`{success: false, message}` responses. None of them are retried: each comes from
a deterministic conflict with the current store state.
"""


class SocietyError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(SocietyError, LookupError):
    status_code = 404

    def __init__(self, entity: str, key):
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class DuplicateCycle(SocietyError):
    def __init__(self, cycle_label: str):
        super().__init__(f"Bills already generated for {cycle_label}")
        self.cycle_label = cycle_label


class SlotTaken(SocietyError):
    def __init__(self, amenity: str, booking_date, time_slot: str):
        super().__init__("Slot already booked")
        self.amenity = amenity
        self.booking_date = booking_date
        self.time_slot = time_slot


class ValidationFailure(SocietyError, ValueError):
    pass


class InvalidTransition(ValidationFailure):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move complaint from {current} to {requested}")
        self.current = current
        self.requested = requested


class DuplicateUsername(ValidationFailure):
    def __init__(self, username: str):
        super().__init__("Username already exists")
        self.username = username


class MismatchedReference(SocietyError):
    def __init__(self, bill_id: int, flat_id: str):
        super().__init__(f"Bill {bill_id} does not belong to flat {flat_id}")
        self.bill_id = bill_id
        self.flat_id = flat_id


class PermissionDenied(SocietyError, PermissionError):
    status_code = 403
