"""AuditRecord entity for the immutable audit trail."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class AuditRecord:
    """
    A structured fact about something that happened to a ledger entity.

    Records are write-once; corrections are new records, never updates.
    """

    entity_type: str
    entity_id: str
    action: str
    payload: dict[str, Any] = field(default_factory=dict)
    actor: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "action": self.action,
            "actor": self.actor,
            "payload": self.payload,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at.isoformat() + "Z",
        }
