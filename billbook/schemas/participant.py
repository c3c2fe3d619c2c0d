from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime


class ParticipantCreate(BaseModel):
    name: str = Field(..., max_length=100)


class ParticipantResponse(BaseModel):
    """Registry participant as returned to its owner (owner id is never echoed)."""
    id: UUID
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
