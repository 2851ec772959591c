# workforce/services/audit.py
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from workforce.core.enums import AuditOutcome
from workforce.core.errors import AppError
from workforce.core.security import Identified, Session
from workforce.db.gateway import Gateway
from workforce.db.models import AuditLog

logger = logging.getLogger(__name__)


@dataclass
class AuditEntry:
    action: str
    entity: str
    entity_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    audit_id: Optional[int] = None

    def target(self, obj) -> None:
        self.entity_id = str(obj.id)


class AuditTrail:
    """
    Append-only log of mutating actions.

    ``mutation()`` opens the transaction the domain writes go into; the SUCCESS entry is
    written last inside that same transaction, so both commit or neither does. A domain
    error rolls the writes back and leaves a FAILURE entry committed on its own.
    """

    def __init__(self, gateway: Gateway, session: Session, ip_address: Optional[str] = None):
        self._gateway = gateway
        self._session = session
        self._ip_address = ip_address

    @contextmanager
    def mutation(self, action: str, entity: str, entity_id=None, **metadata) -> Iterator[AuditEntry]:
        entry = AuditEntry(
            action=action,
            entity=entity,
            entity_id=str(entity_id) if entity_id is not None else None,
            metadata=metadata,
        )
        try:
            with self._gateway.transaction():
                yield entry
                entry.audit_id = self._write(entry, AuditOutcome.SUCCESS).id
        except AppError as exc:
            self._record_failure(entry, exc)
            raise
        logger.info("%s on %s %s by user %s", entry.action, entry.entity, entry.entity_id, self._user_id)

    @property
    def _user_id(self) -> Optional[str]:
        return str(self._session.id) if isinstance(self._session, Identified) else None

    @property
    def _user_name(self) -> Optional[str]:
        return self._session.name if isinstance(self._session, Identified) else None

    def _write(self, entry: AuditEntry, outcome: AuditOutcome, extra: Optional[Dict[str, Any]] = None) -> AuditLog:
        return self._gateway.create(
            AuditLog,
            user_id=self._user_id,
            user_name=self._user_name,
            action=entry.action,
            entity=entry.entity,
            entity_id=entry.entity_id,
            ip_address=self._ip_address,
            details=_jsonable({**entry.metadata, **(extra or {})}),
            outcome=outcome.value,
        )

    def _record_failure(self, entry: AuditEntry, exc: AppError) -> None:
        logger.info("%s on %s failed: %s", entry.action, entry.entity, exc.code)
        try:
            with self._gateway.transaction():
                self._write(entry, AuditOutcome.FAILURE, {"error": exc.code, "message": exc.message})
        except Exception:
            # The caller still gets the original error.
            logger.exception("Could not record failed %s", entry.action)


def _jsonable(value):
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value
