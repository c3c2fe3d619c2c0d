from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from uuid import UUID, uuid4
from datetime import datetime, date

from billbook.models.enums import BillStatus
from billbook.services.totals import average_per_day
from billbook.utils.time import get_utc_now


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# ---------------------------------------------------------------------------
# Embedded documents (stored as JSON on the bill row)
# ---------------------------------------------------------------------------

class BillParticipant(BaseModel):
    """Participant embedded in a bill's own list."""
    id: UUID = Field(default_factory=uuid4)
    name: str
    joined_at: datetime = Field(default_factory=get_utc_now)


class DailyDetail(BaseModel):
    """One dated expense entry, split among selected participants."""
    id: UUID = Field(default_factory=uuid4)
    date: date
    amount: float
    split_count: int = 1
    selected_participants: List[UUID] = []
    description: Optional[str] = None
    amount_per_person: float = 0.0


class BillDocument(BaseModel):
    """
    Typed view of a persisted bill.

    Services load the ORM row into this model, mutate it, recompute derived
    fields and write it back; reporting code only ever sees this type.
    """
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    qr_image: Optional[str] = None
    start_date: date
    end_date: date
    participants: List[BillParticipant] = []
    daily_details: List[DailyDetail] = []
    total_amount: float = 0.0
    total_days: int = 0
    status: BillStatus = BillStatus.DRAFT
    share_key: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("participants", "daily_details", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v

    @property
    def average_per_day(self) -> float:
        return average_per_day(self.total_amount, self.total_days)

    @property
    def total_participants(self) -> int:
        return len(self.participants)

    def find_detail(self, detail_id: UUID) -> Optional[DailyDetail]:
        for detail in self.daily_details:
            if detail.id == detail_id:
                return detail
        return None

    def find_participant(self, participant_id: UUID) -> Optional[BillParticipant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class BillParticipantAdd(BaseModel):
    """Add a registry participant (by id) or an ad-hoc name to a bill."""
    participant_id: Optional[UUID] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def one_source(self):
        if (self.participant_id is None) == (self.name is None):
            raise ValueError("Provide exactly one of participant_id or name")
        return self


class BillCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    qr_image: Optional[str] = None
    start_date: date
    end_date: date
    status: BillStatus = BillStatus.DRAFT
    participants: List[BillParticipantAdd] = []

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class BillUpdate(BaseModel):
    """Partial edit of bill fields. Embedded lists have their own endpoints."""
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    qr_image: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[BillStatus] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class DailyDetailCreate(BaseModel):
    """
    Full set of daily-detail fields; also used for edits (full replace).
    split_count defaults to the selection size, or 1 when nothing is selected.
    """
    date: date
    amount: float
    split_count: Optional[int] = None
    selected_participants: List[UUID] = []
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class BillResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    qr_image: Optional[str] = None
    start_date: date
    end_date: date
    participants: List[BillParticipant]
    daily_details: List[DailyDetail]
    total_amount: float
    total_days: int
    status: BillStatus
    share_key: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def average_per_day(self) -> float:
        return average_per_day(self.total_amount, self.total_days)

    @computed_field
    @property
    def total_participants(self) -> int:
        return len(self.participants)
