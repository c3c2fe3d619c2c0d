"""Global participant registry endpoints"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from billbook.api import deps
from billbook.models.user import User
from billbook.services.participant_service import ParticipantService
from billbook.schemas.participant import ParticipantCreate, ParticipantResponse
from billbook.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("", response_model=SuccessResponse)
async def list_participants(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Registry participants of the current user, newest first."""
    participants = await ParticipantService.list_participants(db, current_user.id)
    return SuccessResponse(
        data=[ParticipantResponse.model_validate(p) for p in participants]
    )


@router.post("", response_model=SuccessResponse)
async def create_participant(
    participant_in: ParticipantCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    participant = await ParticipantService.create_participant(
        db, current_user.id, participant_in.name
    )
    return SuccessResponse(
        data=ParticipantResponse.model_validate(participant),
        message="Participant created successfully",
    )


@router.delete("/{participant_id}", response_model=SuccessResponse)
async def delete_participant(
    participant_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Remove a participant from the registry and from every bill's participant list.
    Past daily details keep the id and show it as Unknown.
    """
    bills_updated = await ParticipantService.delete_participant(
        db, participant_id, current_user.id
    )
    return SuccessResponse(
        data={"id": participant_id, "bills_updated": bills_updated},
        message="Participant deleted successfully",
    )
