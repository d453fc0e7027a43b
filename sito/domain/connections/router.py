"""Connection router - FastAPI endpoints for connections"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ...services.notification_service import NotificationOutbox, get_outbox
from .schemas import ConnectionCreate, ConnectionResponse, RelationshipResponse
from .service import ConnectionService

router = APIRouter(prefix="/connections", tags=["Connections"])


def get_connection_service(
    db: Session = Depends(get_db), outbox: NotificationOutbox = Depends(get_outbox)
) -> ConnectionService:
    """Dependency injection for ConnectionService"""
    return ConnectionService(db, outbox)


@router.post("", response_model=ConnectionResponse, status_code=201)
async def request_connection(
    data: ConnectionCreate,
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    return service.request(current_user, data.owner_id)


@router.post("/{connection_id}/accept", response_model=ConnectionResponse)
async def accept_connection(
    connection_id: str,
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    return service.accept(current_user, connection_id)


@router.post("/{connection_id}/reject", response_model=ConnectionResponse)
async def reject_connection(
    connection_id: str,
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    return service.reject(current_user, connection_id)


@router.get("/sent", response_model=list[ConnectionResponse])
async def list_sent(
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    return service.list_sent(current_user)


@router.get("/received", response_model=list[ConnectionResponse])
async def list_received(
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    return service.list_received(current_user)


@router.get("/accepted", response_model=list[ConnectionResponse])
async def list_accepted(
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    """Accepted connections in either direction"""
    return service.list_accepted(current_user)


@router.get("/with/{profile_id}", response_model=RelationshipResponse)
async def get_relationship(
    profile_id: str,
    current_user: Profile = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
):
    return service.relationship(current_user, profile_id)
