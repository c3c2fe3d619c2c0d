"""Public read-only bill pages (share links). No authentication."""

from typing import Any
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from billbook.api import deps
from billbook.config import settings
from billbook.core.rate_limit import limiter
from billbook.services.bill_service import BillService
from billbook.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/bills/{share_key}", response_model=SuccessResponse)
@limiter.limit(settings.PUBLIC_RATE_LIMIT)
async def get_shared_bill(
    request: Request,
    share_key: str,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Bill overview and per-participant breakdown for a share key."""
    info, summary = await BillService.get_public_view(db, share_key)
    return SuccessResponse(data={"bill": info, "summary": summary})
