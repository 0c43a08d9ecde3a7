from society.handlers.base import Router, Response
from society.schemas.caller import Capability
from society.schemas.requests import BookRequest, IdRequest, ComplaintRequest
from society.schemas.responses import (
    DashboardOut, FlatOut, BillOut, AlertOut, VisitorOut, ComplaintOut
)
from society.services.errors import ValidationFailure

router = Router("resident")


@router.endpoint("resident_dashboard", capability=Capability.view_dashboard)
async def dashboard(services, caller, request):
    if not caller.flat_id:
        raise ValidationFailure("No flat linked to this account")
    d = await services.dashboard.resident_dashboard(caller.flat_id)
    return DashboardOut(
        flat=FlatOut.model_validate(d.flat),
        bills=[BillOut.model_validate(b) for b in d.bills],
        alerts=[AlertOut.model_validate(a) for a in d.alerts],
        visitors=[VisitorOut.model_validate(v) for v in d.visitors],
        complaints=[ComplaintOut.model_validate(c) for c in d.complaints],
    ).model_dump(mode="json")


@router.endpoint("raise_complaint", capability=Capability.raise_complaint, body=ComplaintRequest)
async def raise_complaint(services, caller, request: ComplaintRequest):
    await services.complaints.raise_complaint(caller, request.title, request.description, request.category)
    return Response.ok()


@router.endpoint("book", capability=Capability.book_amenity, body=BookRequest)
async def book(services, caller, request: BookRequest):
    await services.bookings.book(caller, request.amenity, request.booking_date, request.time_slot)
    return Response.ok()


@router.endpoint("cancel_booking", body=IdRequest)
async def cancel_booking(services, caller, request: IdRequest):
    # Ownership (own flat or admin) is checked by the booking service
    await services.bookings.cancel(caller, request.id)
    return Response.ok()
