from society.handlers.base import Router, Response
from society.schemas.caller import Capability
from society.schemas.requests import VisitorEntryRequest, IdRequest
from society.schemas.responses import VisitorOut

router = Router("security")


@router.endpoint("visitors", capability=Capability.log_visitors)
async def list_visitors(services, caller, request):
    visitors = await services.visitors.list_all()
    return [VisitorOut.model_validate(v).model_dump(mode="json") for v in visitors]


@router.endpoint("active_visitors", capability=Capability.log_visitors)
async def list_active_visitors(services, caller, request):
    visitors = await services.visitors.list_active()
    return [VisitorOut.model_validate(v).model_dump(mode="json") for v in visitors]


@router.endpoint("visitor_entry", capability=Capability.log_visitors, body=VisitorEntryRequest)
async def visitor_entry(services, caller, request: VisitorEntryRequest):
    await services.visitors.record_entry(caller, request.name, request.tower, request.flat_id)
    return Response.ok()


@router.endpoint("visitor_exit", capability=Capability.log_visitors, body=IdRequest)
async def visitor_exit(services, caller, request: IdRequest):
    await services.visitors.record_exit(caller, request.id)
    return Response.ok()
