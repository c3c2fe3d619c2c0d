"""Bill Service - bill lifecycle, embedded participants and daily details"""

import math
import uuid
from datetime import date, datetime
from typing import AbstractSet, List, Optional, Tuple
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from billbook.core.exceptions import NotFoundError, ValidationError
from billbook.core.security import generate_share_key
from billbook.models.bill import Bill
from billbook.models.enums import BillStatus
from billbook.schemas.bill import (
    BillCreate,
    BillDocument,
    BillParticipant,
    BillParticipantAdd,
    BillUpdate,
    DailyDetail,
    DailyDetailCreate,
)
from billbook.schemas.summary import BillInfo, BillReport, BillSummary, OverallSummary, OwnerStats
from billbook.services import report_service
from billbook.services.allocation import EMPTY_EXCLUSION
from billbook.services.participant_service import ParticipantService, clean_participant_name
from billbook.services.totals import recompute_totals

logger = logging.getLogger(__name__)


def validate_period(start_date: date, end_date: date) -> None:
    if start_date >= end_date:
        raise ValidationError("End date must be after start date")


def clean_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title is required")
    return cleaned


def build_daily_detail(data: DailyDetailCreate, detail_id: Optional[UUID] = None) -> DailyDetail:
    """
    Validate request fields and build a full daily detail (edits replace every field).

    Raises:
        ValidationError: Negative or non-finite amount, split count below 1
    """
    amount = float(data.amount)
    if math.isnan(amount) or math.isinf(amount):
        raise ValidationError("Amount must be a number")
    if amount < 0:
        raise ValidationError("Amount must not be negative")

    selected = list(dict.fromkeys(data.selected_participants))
    split_count = data.split_count
    if split_count is None:
        split_count = len(selected) or 1
    if split_count < 1:
        raise ValidationError("Split count must be at least 1")

    return DailyDetail(
        id=detail_id or uuid.uuid4(),
        date=data.date,
        amount=amount,
        split_count=split_count,
        selected_participants=selected,
        description=data.description,
    )


class BillService:
    """
    Every mutation loads the bill as a BillDocument, changes it, recomputes
    derived totals and writes the whole document back before committing.
    Validation happens before the row is touched.
    """

    @staticmethod
    def to_document(bill: Bill) -> BillDocument:
        return BillDocument.model_validate(bill)

    @staticmethod
    def _write_back(bill: Bill, document: BillDocument) -> None:
        recompute_totals(document)
        bill.participants = [p.model_dump(mode="json") for p in document.participants]
        bill.daily_details = [d.model_dump(mode="json") for d in document.daily_details]
        bill.total_amount = document.total_amount
        bill.total_days = document.total_days

    @staticmethod
    async def _save(db: AsyncSession, bill: Bill) -> Bill:
        await db.commit()
        await db.refresh(bill)
        return bill

    @staticmethod
    async def get_bill(db: AsyncSession, bill_id: UUID, user_id: UUID) -> Bill:
        """
        Load one bill of an owner.

        Raises:
            NotFoundError: If no bill with this id belongs to the owner
        """
        result = await db.execute(
            select(Bill).where(Bill.id == bill_id, Bill.user_id == user_id)
        )
        bill = result.scalar_one_or_none()
        if bill is None:
            raise NotFoundError("Bill not found")
        return bill

    @staticmethod
    async def list_bills(
        db: AsyncSession,
        user_id: UUID,
        status: Optional[BillStatus] = None,
    ) -> List[Bill]:
        query = select(Bill).where(Bill.user_id == user_id)
        if status is not None:
            query = query.where(Bill.status == status)
        result = await db.execute(query.order_by(Bill.updated_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def _resolve_new_participant(
        db: AsyncSession,
        user_id: UUID,
        data: BillParticipantAdd,
    ) -> BillParticipant:
        if data.participant_id is not None:
            registered = await ParticipantService.get_participant(db, data.participant_id, user_id)
            return BillParticipant(id=registered.id, name=registered.name)
        return BillParticipant(name=clean_participant_name(data.name))

    @staticmethod
    async def create_bill(db: AsyncSession, user_id: UUID, data: BillCreate) -> Bill:
        title = clean_title(data.title)
        validate_period(data.start_date, data.end_date)

        participants: List[BillParticipant] = []
        for entry in data.participants:
            participant = await BillService._resolve_new_participant(db, user_id, entry)
            if any(p.id == participant.id for p in participants):
                raise ValidationError("Participant is already in this bill")
            participants.append(participant)

        bill = Bill(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            description=data.description,
            qr_image=data.qr_image,
            start_date=data.start_date,
            end_date=data.end_date,
            status=data.status,
            participants=[p.model_dump(mode="json") for p in participants],
            daily_details=[],
            total_amount=0.0,
            total_days=0,
        )
        db.add(bill)
        await BillService._save(db, bill)
        logger.info("Bill created", extra={"user_id": str(user_id), "bill_id": str(bill.id)})
        return bill

    @staticmethod
    async def update_bill(db: AsyncSession, bill_id: UUID, user_id: UUID, data: BillUpdate) -> Bill:
        bill = await BillService.get_bill(db, bill_id, user_id)
        changes = data.model_dump(exclude_unset=True)

        if "title" in changes:
            changes["title"] = clean_title(changes["title"])
        if "description" in changes and changes["description"] is not None:
            changes["description"] = changes["description"].strip() or None
        if changes.get("status") is None:
            changes.pop("status", None)
        for field in ("start_date", "end_date"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be empty")
        validate_period(
            changes.get("start_date", bill.start_date),
            changes.get("end_date", bill.end_date),
        )

        for field, value in changes.items():
            setattr(bill, field, value)
        await BillService._save(db, bill)
        logger.info("Bill updated", extra={"bill_id": str(bill_id), "fields": sorted(changes)})
        return bill

    @staticmethod
    async def delete_bill(db: AsyncSession, bill_id: UUID, user_id: UUID) -> None:
        bill = await BillService.get_bill(db, bill_id, user_id)
        await db.delete(bill)
        await db.commit()
        logger.info("Bill deleted", extra={"user_id": str(user_id), "bill_id": str(bill_id)})

    # ------------------------------------------------------------------
    # Embedded participants
    # ------------------------------------------------------------------

    @staticmethod
    async def add_participant(
        db: AsyncSession,
        bill_id: UUID,
        user_id: UUID,
        data: BillParticipantAdd,
    ) -> Bill:
        bill = await BillService.get_bill(db, bill_id, user_id)
        document = BillService.to_document(bill)
        participant = await BillService._resolve_new_participant(db, user_id, data)
        if document.find_participant(participant.id) is not None:
            raise ValidationError("Participant is already in this bill")

        document.participants.append(participant)
        BillService._write_back(bill, document)
        return await BillService._save(db, bill)

    @staticmethod
    async def remove_participant(
        db: AsyncSession,
        bill_id: UUID,
        participant_id: UUID,
        user_id: UUID,
    ) -> Bill:
        """Drop a participant from the bill's list; daily-detail selections are left as they are."""
        bill = await BillService.get_bill(db, bill_id, user_id)
        document = BillService.to_document(bill)
        if document.find_participant(participant_id) is None:
            raise NotFoundError("Participant not found")

        document.participants = [p for p in document.participants if p.id != participant_id]
        BillService._write_back(bill, document)
        return await BillService._save(db, bill)

    # ------------------------------------------------------------------
    # Daily details
    # ------------------------------------------------------------------

    @staticmethod
    async def add_daily_detail(
        db: AsyncSession,
        bill_id: UUID,
        user_id: UUID,
        data: DailyDetailCreate,
    ) -> Bill:
        bill = await BillService.get_bill(db, bill_id, user_id)
        detail = build_daily_detail(data)
        document = BillService.to_document(bill)

        document.daily_details.append(detail)
        BillService._write_back(bill, document)
        await BillService._save(db, bill)
        logger.info(
            "Daily detail added",
            extra={"bill_id": str(bill_id), "detail_id": str(detail.id), "amount": detail.amount},
        )
        return bill

    @staticmethod
    async def update_daily_detail(
        db: AsyncSession,
        bill_id: UUID,
        detail_id: UUID,
        user_id: UUID,
        data: DailyDetailCreate,
    ) -> Bill:
        bill = await BillService.get_bill(db, bill_id, user_id)
        document = BillService.to_document(bill)
        if document.find_detail(detail_id) is None:
            raise NotFoundError("Daily detail not found")
        replacement = build_daily_detail(data, detail_id=detail_id)

        document.daily_details = [
            replacement if d.id == detail_id else d for d in document.daily_details
        ]
        BillService._write_back(bill, document)
        return await BillService._save(db, bill)

    @staticmethod
    async def remove_daily_detail(
        db: AsyncSession,
        bill_id: UUID,
        detail_id: UUID,
        user_id: UUID,
    ) -> Bill:
        bill = await BillService.get_bill(db, bill_id, user_id)
        document = BillService.to_document(bill)
        if document.find_detail(detail_id) is None:
            raise NotFoundError("Daily detail not found")

        document.daily_details = [d for d in document.daily_details if d.id != detail_id]
        BillService._write_back(bill, document)
        return await BillService._save(db, bill)

    # ------------------------------------------------------------------
    # Share links
    # ------------------------------------------------------------------

    @staticmethod
    async def enable_share(db: AsyncSession, bill_id: UUID, user_id: UUID) -> Bill:
        """Give the bill a share key if it has none; an existing key is kept."""
        bill = await BillService.get_bill(db, bill_id, user_id)
        if bill.share_key:
            return bill

        key = generate_share_key()
        while (await db.execute(select(Bill.id).where(Bill.share_key == key))).first():
            key = generate_share_key()
        bill.share_key = key
        return await BillService._save(db, bill)

    @staticmethod
    async def disable_share(db: AsyncSession, bill_id: UUID, user_id: UUID) -> Bill:
        bill = await BillService.get_bill(db, bill_id, user_id)
        bill.share_key = None
        return await BillService._save(db, bill)

    @staticmethod
    async def get_shared_bill(db: AsyncSession, share_key: str) -> Bill:
        if not share_key:
            raise NotFoundError("Bill not found")
        result = await db.execute(select(Bill).where(Bill.share_key == share_key))
        bill = result.scalar_one_or_none()
        if bill is None:
            raise NotFoundError("Bill not found")
        return bill

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    async def get_summary(
        db: AsyncSession,
        bill_id: UUID,
        user_id: UUID,
        excluded_ids: AbstractSet[UUID] = EMPTY_EXCLUSION,
        detailed: bool = False,
    ) -> BillSummary:
        bill = await BillService.get_bill(db, bill_id, user_id)
        registry = await ParticipantService.get_registry(db, user_id)
        return report_service.compute_summary(
            BillService.to_document(bill),
            excluded_ids=excluded_ids,
            registry=registry,
            detailed=detailed,
        )

    @staticmethod
    async def get_report(
        db: AsyncSession,
        bill_id: UUID,
        user_id: UUID,
        excluded_ids: AbstractSet[UUID] = EMPTY_EXCLUSION,
        generated_at: Optional[datetime] = None,
    ) -> BillReport:
        bill = await BillService.get_bill(db, bill_id, user_id)
        registry = await ParticipantService.get_registry(db, user_id)
        return report_service.build_report(
            BillService.to_document(bill),
            excluded_ids=excluded_ids,
            registry=registry,
            generated_at=generated_at,
        )

    @staticmethod
    async def get_public_view(db: AsyncSession, share_key: str) -> Tuple[BillInfo, BillSummary]:
        """Bill fields and detailed summary for a share link; nothing identifies the owner."""
        bill = await BillService.get_shared_bill(db, share_key)
        registry = await ParticipantService.get_registry(db, bill.user_id)
        document = BillService.to_document(bill)
        summary = report_service.compute_summary(document, registry=registry, detailed=True)
        return report_service.bill_info(document, summary), summary

    @staticmethod
    async def get_stats(db: AsyncSession, user_id: UUID) -> OwnerStats:
        bills = await BillService.list_bills(db, user_id)
        return report_service.compute_owner_stats(BillService.to_document(b) for b in bills)

    @staticmethod
    async def get_overall_summary(db: AsyncSession, user_id: UUID) -> OverallSummary:
        bills = await BillService.list_bills(db, user_id)
        return report_service.compute_overall_summary(BillService.to_document(b) for b in bills)
