"""Connection service - request, accept and reject between profiles"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import CONNECTION_ACCEPTED, CONNECTION_REJECTED, Connection, Profile
from ...services.notification_service import EVENT_CONNECTION, NotificationOutbox, OutboundEvent
from ...shared.validators import validate_uuid
from .repository import ConnectionRepository
from .schemas import RelationshipResponse

logger = logging.getLogger(__name__)


class ConnectionService:
    """
    Each direction is its own row: A -> B and B -> A may both exist with
    independent statuses. A row moves pending -> accepted | rejected once.
    """

    def __init__(self, db: Session, outbox: Optional[NotificationOutbox] = None):
        self.db = db
        self.repo = ConnectionRepository()
        self.outbox = outbox

    def request(self, requester: Profile, owner_id: str) -> Connection:
        if not validate_uuid(owner_id):
            raise HTTPException(status_code=400, detail="Invalid profile id")
        if owner_id == requester.id:
            raise HTTPException(status_code=400, detail="You cannot connect with yourself")
        if not self.repo.get_profile(self.db, owner_id):
            raise HTTPException(status_code=404, detail="Profile not found")

        if self.repo.get_pair(self.db, requester.id, owner_id):
            logger.warning(f"⚠️ Duplicate connection request {requester.id} -> {owner_id}")
            raise HTTPException(status_code=409, detail="Connection already requested")

        try:
            connection = self.repo.create_connection(self.db, requester.id, owner_id)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent connection request {requester.id} -> {owner_id}")
            raise HTTPException(status_code=409, detail="Connection already requested") from e

        logger.info(f"✅ Connection requested {requester.id} -> {owner_id}")
        if self.outbox:
            self.outbox.emit(
                OutboundEvent(
                    kind=EVENT_CONNECTION,
                    recipient_id=owner_id,
                    summary=f"{requester.name or requester.email} wants to connect",
                    details={"requester_name": requester.name or requester.email},
                )
            )
        return connection

    def accept(self, owner: Profile, connection_id: str) -> Connection:
        return self._transition(owner, connection_id, CONNECTION_ACCEPTED)

    def reject(self, owner: Profile, connection_id: str) -> Connection:
        return self._transition(owner, connection_id, CONNECTION_REJECTED)

    def _transition(self, owner: Profile, connection_id: str, status: str) -> Connection:
        connection = self.repo.get_connection(self.db, connection_id)
        if not connection:
            raise HTTPException(status_code=404, detail="Connection not found")
        if connection.owner_id != owner.id:
            raise HTTPException(status_code=403, detail="Only the recipient can answer this request")

        if not self.repo.transition(self.db, connection_id, owner.id, status):
            raise HTTPException(status_code=409, detail="This request has already been answered")

        self.db.refresh(connection)
        logger.info(f"✅ Connection {connection_id} {status}")
        return connection

    def relationship(self, viewer: Profile, other_id: str) -> RelationshipResponse:
        outgoing = self.repo.get_pair(self.db, viewer.id, other_id)
        incoming = self.repo.get_pair(self.db, other_id, viewer.id)
        return RelationshipResponse(
            outgoing=outgoing.status if outgoing else None,
            incoming=incoming.status if incoming else None,
            connected=any(c is not None and c.status == CONNECTION_ACCEPTED for c in (outgoing, incoming)),
        )

    def list_sent(self, profile: Profile) -> list[Connection]:
        return self.repo.list_sent(self.db, profile.id)

    def list_received(self, profile: Profile) -> list[Connection]:
        return self.repo.list_received(self.db, profile.id)

    def list_accepted(self, profile: Profile) -> list[Connection]:
        return self.repo.list_accepted(self.db, profile.id)
