"""Connection repository - Database operations for connections"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import CONNECTION_ACCEPTED, CONNECTION_PENDING, Connection, Profile


class ConnectionRepository:
    """Repository for connection database operations"""

    @staticmethod
    def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def get_connection(db: Session, connection_id: str) -> Optional[Connection]:
        return db.query(Connection).filter(Connection.id == connection_id).first()

    @staticmethod
    def get_pair(db: Session, requester_id: str, owner_id: str) -> Optional[Connection]:
        """The row for one direction only"""
        return (
            db.query(Connection)
            .filter(Connection.requester_id == requester_id, Connection.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def create_connection(db: Session, requester_id: str, owner_id: str) -> Connection:
        """Insert a pending request. Raises IntegrityError for a duplicate pair."""
        connection = Connection(
            requester_id=requester_id, owner_id=owner_id, status=CONNECTION_PENDING
        )
        db.add(connection)
        db.commit()
        db.refresh(connection)
        return connection

    @staticmethod
    def transition(db: Session, connection_id: str, owner_id: str, status: str) -> bool:
        """Move a pending connection to ``status`` if the owner matches. Commits."""
        updated = (
            db.query(Connection)
            .filter(
                Connection.id == connection_id,
                Connection.owner_id == owner_id,
                Connection.status == CONNECTION_PENDING,
            )
            .update({Connection.status: status}, synchronize_session=False)
        )
        db.commit()
        return updated == 1

    @staticmethod
    def list_sent(db: Session, requester_id: str) -> list[Connection]:
        return (
            db.query(Connection)
            .filter(Connection.requester_id == requester_id)
            .order_by(Connection.created_at.desc())
            .all()
        )

    @staticmethod
    def list_received(db: Session, owner_id: str) -> list[Connection]:
        return (
            db.query(Connection)
            .filter(Connection.owner_id == owner_id)
            .order_by(Connection.created_at.desc())
            .all()
        )

    @staticmethod
    def list_accepted(db: Session, profile_id: str) -> list[Connection]:
        return (
            db.query(Connection)
            .filter(
                or_(Connection.requester_id == profile_id, Connection.owner_id == profile_id),
                Connection.status == CONNECTION_ACCEPTED,
            )
            .order_by(Connection.created_at.desc())
            .all()
        )
