"""Connection domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

ConnectionStatus = Literal["pending", "accepted", "rejected"]


class ConnectionCreate(BaseModel):
    owner_id: str


class ConnectionResponse(BaseModel):
    id: str
    requester_id: str
    owner_id: str
    status: ConnectionStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RelationshipResponse(BaseModel):
    """Both directions between the viewer and another profile"""

    outgoing: Optional[ConnectionStatus] = None
    incoming: Optional[ConnectionStatus] = None
    connected: bool = False
