"""Participant Service - the owner's global participant registry"""

from typing import Dict, List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from billbook.core.exceptions import NotFoundError, ValidationError
from billbook.models.bill import Bill
from billbook.models.participant import Participant

logger = logging.getLogger(__name__)


def clean_participant_name(name) -> str:
    """Trimmed participant name; blank names are rejected."""
    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        raise ValidationError("Participant name is required")
    if len(cleaned) > 100:
        raise ValidationError("Participant name must be at most 100 characters")
    return cleaned


class ParticipantService:
    """Registry participants are reusable across every bill of one owner."""

    @staticmethod
    async def create_participant(db: AsyncSession, user_id: UUID, name: str) -> Participant:
        participant = Participant(user_id=user_id, name=clean_participant_name(name))
        db.add(participant)
        await db.commit()
        await db.refresh(participant)
        logger.info(
            "Participant created",
            extra={"user_id": str(user_id), "participant_id": str(participant.id)},
        )
        return participant

    @staticmethod
    async def list_participants(db: AsyncSession, user_id: UUID) -> List[Participant]:
        result = await db.execute(
            select(Participant)
            .where(Participant.user_id == user_id)
            .order_by(Participant.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_participant(db: AsyncSession, participant_id: UUID, user_id: UUID) -> Participant:
        """
        Raises:
            NotFoundError: If the participant does not exist for this owner
        """
        result = await db.execute(
            select(Participant).where(
                Participant.id == participant_id,
                Participant.user_id == user_id,
            )
        )
        participant = result.scalar_one_or_none()
        if participant is None:
            raise NotFoundError("Participant not found")
        return participant

    @staticmethod
    async def get_registry(db: AsyncSession, user_id: UUID) -> Dict[UUID, str]:
        """Owner's registry as id -> name, for resolving names in summaries."""
        result = await db.execute(
            select(Participant.id, Participant.name).where(Participant.user_id == user_id)
        )
        return {row[0]: row[1] for row in result.all()}

    @staticmethod
    async def delete_participant(db: AsyncSession, participant_id: UUID, user_id: UUID) -> int:
        """
        Remove a registry participant and strip it from the owner's bills.

        Only embedded participant lists are swept; daily details keep their
        selected ids, which then resolve to the Unknown placeholder.

        Returns:
            Number of bills whose participant list changed
        """
        participant = await ParticipantService.get_participant(db, participant_id, user_id)

        result = await db.execute(select(Bill).where(Bill.user_id == user_id))
        target = str(participant_id)
        touched = 0
        for bill in result.scalars().all():
            embedded = bill.participants or []
            kept = [p for p in embedded if str(p.get("id")) != target]
            if len(kept) != len(embedded):
                bill.participants = kept
                touched += 1

        await db.delete(participant)
        await db.commit()
        logger.info(
            "Participant deleted",
            extra={
                "user_id": str(user_id),
                "participant_id": target,
                "bills_updated": touched,
            },
        )
        return touched
