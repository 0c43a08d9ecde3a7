from society.handlers.base import Router, Response
from society.schemas.caller import Capability
from society.schemas.requests import (
    GenerateBillsRequest, MarkPaidRequest, AlertRequest, EventRequest, ComplaintStatusRequest
)
from society.schemas.responses import StatsResponse, PredictionResponse, FlatOut, BillOut, ActivityOut, ComplaintOut
from society.services.stats_service import INSUFFICIENT_DATA

router = Router("admin")


@router.endpoint("flats", capability=Capability.manage_flats)
async def list_flats(services, caller, request):
    flats = await services.flats.list_flats()
    return [FlatOut.model_validate(f).model_dump() for f in flats]


@router.endpoint("bills", capability=Capability.manage_billing)
async def list_bills(services, caller, request):
    bills = await services.billing.list_bills()
    return [BillOut.model_validate(b).model_dump(mode="json") for b in bills]


@router.endpoint("stats", capability=Capability.view_reports)
async def stats(services, caller, request):
    s = await services.stats.compute_stats()
    return StatsResponse(
        total_flats=s.total_flats,
        paid_flats=s.paid_flats,
        pending_complaints=s.pending_complaints,
        active_visitors=s.active_visitors,
        total_collected=s.total_collected,
        total_pending=s.total_pending,
    ).dump()


@router.endpoint("ai_prediction", capability=Capability.view_reports)
async def ai_prediction(services, caller, request):
    p = await services.stats.predict_budget()
    if p.insufficient_data:
        return {"suggestion": INSUFFICIENT_DATA, "growth": 0}
    return PredictionResponse(
        suggestion=p.suggestion,
        growth=p.growth,
        confidence=p.confidence,
        recent_expense=p.recent_expense,
        previous_expense=p.previous_expense,
    ).dump()


@router.endpoint("generate_bills", capability=Capability.manage_billing, body=GenerateBillsRequest)
async def generate_bills(services, caller, request: GenerateBillsRequest):
    count = await services.billing.generate_bills_for_cycle(
        caller, request.cycle_label, request.amount, request.due_date
    )
    return Response.ok(message=f"Bills generated for all flats ({count})")


@router.endpoint("mark_paid", capability=Capability.manage_billing, body=MarkPaidRequest)
async def mark_paid(services, caller, request: MarkPaidRequest):
    await services.billing.mark_paid(caller, request.flat_id, request.bill_id)
    return Response.ok()


@router.endpoint("create_alert", capability=Capability.manage_notices, body=AlertRequest)
async def create_alert(services, caller, request: AlertRequest):
    await services.notices.create_alert(caller, request.title, request.message, request.severity, request.tower)
    return Response.ok()


@router.endpoint("create_event", capability=Capability.manage_notices, body=EventRequest)
async def create_event(services, caller, request: EventRequest):
    await services.notices.create_event(caller, request.title, request.description, request.event_date)
    return Response.ok()


@router.endpoint("update_complaint", capability=Capability.triage_complaints, body=ComplaintStatusRequest)
async def update_complaint(services, caller, request: ComplaintStatusRequest):
    await services.complaints.update_status(caller, request.id, request.status)
    return Response.ok()


@router.endpoint("complaints", capability=Capability.triage_complaints)
async def list_complaints(services, caller, request):
    complaints = await services.complaints.list_complaints()
    return [ComplaintOut.model_validate(c).model_dump(mode="json") for c in complaints]


@router.endpoint("activity_logs", capability=Capability.view_reports)
async def activity_logs(services, caller, request):
    entries = await services.activity.recent_activity(limit=50)
    return [
        ActivityOut(
            id=e.id,
            user_id=e.user_id,
            user_name=e.user.name if e.user else None,
            action=e.action,
            details=e.details,
            timestamp=e.timestamp,
        ).model_dump(mode="json")
        for e in entries
    ]
