import enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

from society.database.models import Role


class Capability(str, enum.Enum):
    manage_billing = "manage_billing"
    view_reports = "view_reports"
    manage_notices = "manage_notices"
    manage_flats = "manage_flats"
    triage_complaints = "triage_complaints"
    manage_bookings = "manage_bookings"  # cancel anyone's booking
    book_amenity = "book_amenity"
    raise_complaint = "raise_complaint"
    view_dashboard = "view_dashboard"
    log_visitors = "log_visitors"
    read_notices = "read_notices"


ROLE_CAPABILITIES = {
    Role.admin: frozenset({
        Capability.manage_billing,
        Capability.view_reports,
        Capability.manage_notices,
        Capability.manage_flats,
        Capability.triage_complaints,
        Capability.manage_bookings,
        Capability.read_notices,
    }),
    Role.resident: frozenset({
        Capability.book_amenity,
        Capability.raise_complaint,
        Capability.view_dashboard,
        Capability.read_notices,
    }),
    Role.security: frozenset({
        Capability.log_visitors,
        Capability.read_notices,
    }),
}


class Caller(BaseModel):
    """Authenticated identity handed over by the auth collaborator."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role
    flat_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin

    def can(self, capability: Capability) -> bool:
        return capability in ROLE_CAPABILITIES.get(self.role, frozenset())
