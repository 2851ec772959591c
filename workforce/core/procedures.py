# workforce/core/procedures.py
# Trust tiers and the router that pins every remote procedure to one.
import logging
from enum import Enum
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends

from workforce.core.enums import Role
from workforce.core.errors import Forbidden, Unauthenticated
from workforce.core.security import Anonymous, Identified, Session, get_session

logger = logging.getLogger(__name__)


class Tier(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    MANAGER = "manager-or-admin"
    ADMIN = "admin"


MANAGER_ROLES = frozenset({Role.MANAGER, Role.ADMIN})

# Every registered procedure, "namespace.name" -> tier.
REGISTRY: Dict[str, Tier] = {}


def authorize(session: Session, tier: Tier) -> Session:
    """
    Checks a session against a tier and returns it unchanged, or raises.
    Anything that is not a recognised session kind or tier is denied.
    """
    if tier is Tier.PUBLIC:
        return session
    if isinstance(session, Anonymous):
        raise Unauthenticated()
    if not isinstance(session, Identified):
        raise Unauthenticated()

    if tier is Tier.AUTHENTICATED:
        return session
    if tier is Tier.MANAGER:
        if session.role in MANAGER_ROLES:
            return session
        raise Forbidden("Requires manager or admin role")
    if tier is Tier.ADMIN:
        if session.role is Role.ADMIN:
            return session
        raise Forbidden("Requires admin role")
    raise Forbidden(f"Unknown tier {tier!r}")


def require(tier: Tier) -> Callable[..., Session]:
    def dependency(session: Session = Depends(get_session)) -> Session:
        try:
            return authorize(session, tier)
        except (Unauthenticated, Forbidden) as exc:
            logger.warning("Denied %s call: %s", tier.value, exc.message)
            raise
    return dependency


def is_manager(session: Session) -> bool:
    return isinstance(session, Identified) and session.role in MANAGER_ROLES


def is_self_or_manager(session: Session, employee_id: int) -> bool:
    if not isinstance(session, Identified):
        return False
    if session.employee_id is not None and session.employee_id == employee_id:
        return True
    return session.role in MANAGER_ROLES


class ProcedureRouter(APIRouter):
    """
    A router of named procedures served as ``POST /<namespace>.<name>``.
    Routes can only be added through ``procedure()``, which has no default tier.
    """

    def __init__(self, namespace: str, **kwargs):
        super().__init__(**kwargs)
        self.namespace = namespace
        self.procedures: Dict[str, Tier] = {}

    def procedure(self, name: str, *, tier: Tier, **kwargs: Any):
        if not isinstance(tier, Tier):
            raise TypeError(f"Procedure {self.namespace}.{name} must declare a Tier, got {tier!r}")
        full_name = f"{self.namespace}.{name}"
        if full_name in REGISTRY and full_name not in self.procedures:
            raise ValueError(f"Procedure {full_name} is already registered")

        dependencies = [Depends(require(tier))] + list(kwargs.pop("dependencies", None) or [])
        openapi_extra = dict(kwargs.pop("openapi_extra", None) or {})
        openapi_extra["x-tier"] = tier.value

        def decorator(func: Callable) -> Callable:
            self.procedures[full_name] = tier
            REGISTRY[full_name] = tier
            super(ProcedureRouter, self).add_api_route(
                f"/{full_name}",
                func,
                methods=["POST"],
                name=full_name,
                dependencies=dependencies,
                openapi_extra=openapi_extra,
                **kwargs,
            )
            return func
        return decorator

    def add_api_route(self, path: str, endpoint: Callable, **kwargs: Any) -> None:
        raise TypeError(f"Route {path} has no tier; register it with ProcedureRouter.procedure()")
