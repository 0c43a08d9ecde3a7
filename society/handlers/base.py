"""
Framework-free request layer.

Routers register endpoints with the capability they require and the pydantic
model their body must satisfy. The Dispatcher runs the capability check once,
validates the body, calls the endpoint and turns every outcome into a
Response; an HTTP framework only has to forward (caller, payload) and write
the Response back.
"""
import logging
from typing import Any, Callable, Awaitable, Dict, Optional, Type
from pydantic import BaseModel, ValidationError

from society.schemas.caller import Caller, Capability
from society.services.errors import SocietyError, PermissionDenied, ValidationFailure


class Response:
    def __init__(self, status: int, body: Any):
        self.status = status
        self.body = body

    @classmethod
    def ok(cls, **body) -> "Response":
        return cls(200, {"success": True, **body})

    @classmethod
    def fail(cls, status: int, message: str) -> "Response":
        return cls(status, {"success": False, "message": message})

    def __repr__(self):
        return f"Response({self.status}, {self.body!r})"


class Endpoint:
    def __init__(self, name: str, func: Callable[..., Awaitable[Any]], capability: Optional[Capability], body: Optional[Type[BaseModel]]):
        self.name = name
        self.func = func
        self.capability = capability
        self.body = body


class Router:
    def __init__(self, name: str):
        self.name = name
        self.endpoints: Dict[str, Endpoint] = {}

    def endpoint(self, name: str, capability: Optional[Capability] = None, body: Optional[Type[BaseModel]] = None):
        def decorator(func):
            self.endpoints[name] = Endpoint(name, func, capability, body)
            return func
        return decorator


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first['msg']}" if field else first["msg"]


class Dispatcher:
    def __init__(self, services):
        self.services = services
        self.endpoints: Dict[str, Endpoint] = {}

    def include_router(self, router: Router):
        for name, endpoint in router.endpoints.items():
            if name in self.endpoints:
                raise ValueError(f"Endpoint '{name}' registered twice (router {router.name})")
            self.endpoints[name] = endpoint

    async def dispatch(self, name: str, caller: Caller, payload: Optional[dict] = None) -> Response:
        endpoint = self.endpoints.get(name)
        if not endpoint:
            return Response.fail(404, f"Unknown endpoint: {name}")

        try:
            if endpoint.capability and not caller.can(endpoint.capability):
                raise PermissionDenied(f"Role '{caller.role.value}' cannot access {name}")

            request = None
            if endpoint.body is not None:
                try:
                    request = endpoint.body.model_validate(payload or {})
                except ValidationError as e:
                    raise ValidationFailure(_validation_message(e)) from e

            result = await endpoint.func(self.services, caller, request)
            return result if isinstance(result, Response) else Response(200, result)

        except SocietyError as e:
            logging.info(f"{name} rejected for user {caller.user_id}: {e.message}")
            return Response.fail(e.status_code, e.message)
        except Exception as e:
            # Store faults and bugs: opaque to the caller, full trace in the log
            logging.exception(f"Unhandled exception in {name}: {e}")
            return Response.fail(500, "Internal server error")
