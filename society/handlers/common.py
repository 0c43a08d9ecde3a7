from society.handlers.base import Router
from society.database.models import Role, ALL_TOWERS
from society.schemas.caller import Capability
from society.schemas.responses import AlertOut, EventOut

router = Router("common")


@router.endpoint("events", capability=Capability.read_notices)
async def list_events(services, caller, request):
    events = await services.notices.list_events()
    return [EventOut.model_validate(e).model_dump(mode="json") for e in events]


@router.endpoint("alerts", capability=Capability.read_notices)
async def list_alerts(services, caller, request):
    # Residents see their tower plus society-wide alerts; staff see society-wide ones
    if caller.role == Role.resident and caller.flat_id:
        tower = caller.flat_id.split("-", 1)[0]
    else:
        tower = ALL_TOWERS
    alerts = await services.notices.list_alerts(tower=tower)
    return [AlertOut.model_validate(a).model_dump(mode="json") for a in alerts]
