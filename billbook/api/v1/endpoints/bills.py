"""Bill endpoints - bills, their participants and daily details, summaries and share links"""

from typing import Any, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from billbook.api import deps
from billbook.models.enums import BillStatus
from billbook.models.user import User
from billbook.services.bill_service import BillService
from billbook.schemas.bill import (
    BillCreate,
    BillUpdate,
    BillParticipantAdd,
    BillResponse,
    DailyDetailCreate,
)
from billbook.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("", response_model=SuccessResponse)
async def list_bills(
    status: Optional[BillStatus] = None,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Bills of the current user, most recently updated first."""
    bills = await BillService.list_bills(db, current_user.id, status=status)
    return SuccessResponse(data=[BillResponse.model_validate(b) for b in bills])


@router.post("", response_model=SuccessResponse)
async def create_bill(
    bill_in: BillCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.create_bill(db, current_user.id, bill_in)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Bill created successfully",
    )


@router.get("/stats", response_model=SuccessResponse)
async def get_bill_stats(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Counts by status and total amount across the user's bills."""
    stats = await BillService.get_stats(db, current_user.id)
    return SuccessResponse(data=stats)


@router.get("/summary", response_model=SuccessResponse)
async def get_overall_summary(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Per-name totals across every bill of the user."""
    summary = await BillService.get_overall_summary(db, current_user.id)
    return SuccessResponse(data=summary)


@router.get("/{bill_id}", response_model=SuccessResponse)
async def get_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.get_bill(db, bill_id, current_user.id)
    return SuccessResponse(data=BillResponse.model_validate(bill))


@router.put("/{bill_id}", response_model=SuccessResponse)
async def update_bill(
    bill_id: UUID,
    bill_in: BillUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.update_bill(db, bill_id, current_user.id, bill_in)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Bill updated successfully",
    )


@router.delete("/{bill_id}", response_model=SuccessResponse)
async def delete_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    await BillService.delete_bill(db, bill_id, current_user.id)
    return SuccessResponse(message="Bill deleted successfully")


@router.post("/{bill_id}/participants", response_model=SuccessResponse)
async def add_bill_participant(
    bill_id: UUID,
    body: BillParticipantAdd,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Add a registry participant (participant_id) or a new name to the bill."""
    bill = await BillService.add_participant(db, bill_id, current_user.id, body)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Participant added to bill",
    )


@router.delete("/{bill_id}/participants/{participant_id}", response_model=SuccessResponse)
async def remove_bill_participant(
    bill_id: UUID,
    participant_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.remove_participant(db, bill_id, participant_id, current_user.id)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Participant removed from bill",
    )


@router.post("/{bill_id}/daily-details", response_model=SuccessResponse)
async def add_daily_detail(
    bill_id: UUID,
    detail_in: DailyDetailCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.add_daily_detail(db, bill_id, current_user.id, detail_in)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Daily detail added successfully",
    )


@router.put("/{bill_id}/daily-details/{detail_id}", response_model=SuccessResponse)
async def update_daily_detail(
    bill_id: UUID,
    detail_id: UUID,
    detail_in: DailyDetailCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Replace every field of a daily detail."""
    bill = await BillService.update_daily_detail(
        db, bill_id, detail_id, current_user.id, detail_in
    )
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Daily detail updated successfully",
    )


@router.delete("/{bill_id}/daily-details/{detail_id}", response_model=SuccessResponse)
async def remove_daily_detail(
    bill_id: UUID,
    detail_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.remove_daily_detail(db, bill_id, detail_id, current_user.id)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Daily detail removed successfully",
    )


@router.get("/{bill_id}/summary", response_model=SuccessResponse)
async def get_bill_summary(
    bill_id: UUID,
    detailed: bool = False,
    excluded: frozenset = Depends(deps.excluded_participants),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Per-participant totals. Pass ?exclude=<id> (repeatable) to leave people out."""
    summary = await BillService.get_summary(
        db, bill_id, current_user.id, excluded_ids=excluded, detailed=detailed
    )
    return SuccessResponse(data=summary)


@router.get("/{bill_id}/report", response_model=SuccessResponse)
async def get_bill_report(
    bill_id: UUID,
    excluded: frozenset = Depends(deps.excluded_participants),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Itemized report for printing, stamped with generated_at."""
    report = await BillService.get_report(db, bill_id, current_user.id, excluded_ids=excluded)
    return SuccessResponse(data=report)


@router.post("/{bill_id}/share", response_model=SuccessResponse)
async def enable_share(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.enable_share(db, bill_id, current_user.id)
    return SuccessResponse(
        data={"share_key": bill.share_key},
        message="Share link enabled",
    )


@router.delete("/{bill_id}/share", response_model=SuccessResponse)
async def disable_share(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    await BillService.disable_share(db, bill_id, current_user.id)
    return SuccessResponse(message="Share link disabled")
