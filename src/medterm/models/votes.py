"""Pydantic models for per-term vote records."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Translation categories.

    Values are the persisted strings, so existing vote data stays readable.
    """

    LITERAL = "Literal/Common"
    CLINICAL = "Clinical/Formal"
    DESCRIPTIVE = "Descriptive"
    USER = "User Suggested"

    @property
    def weight(self) -> int:
        return CATEGORY_INFO[self].weight

    @property
    def badge(self) -> str:
        return CATEGORY_INFO[self].badge


@dataclass(frozen=True)
class CategoryInfo:
    weight: int
    badge: str


CATEGORY_INFO: dict[Category, CategoryInfo] = {
    Category.CLINICAL: CategoryInfo(weight=4, badge="Clinical"),
    Category.LITERAL: CategoryInfo(weight=3, badge="Common"),
    Category.DESCRIPTIVE: CategoryInfo(weight=2, badge="Descriptive"),
    Category.USER: CategoryInfo(weight=1, badge="Community"),
}


class Origin(str, Enum):
    """Where a translation first came from."""

    AI = "AI"
    USER = "USER"


class InteractionKind(str, Enum):
    """User interaction recorded against a (term, translation) pair."""

    SELECT = "SELECT"
    REJECT = "REJECT"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VoteRecord(BaseModel):
    """Vote counters for one (original term, translation) pair.

    Counters never go negative; mutations clamp at zero.
    """

    selects: int = Field(default=0, ge=0, description="Times this translation was chosen")
    rejects: int = Field(default=0, ge=0, description="Times this translation was dismissed")
    category: Category = Field(default=Category.USER)
    origin: Origin = Field(default=Origin.USER)
    last_updated: datetime = Field(default_factory=utc_now, alias="lastUpdated")

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)


# original term -> translation -> record
TermHistory = dict[str, dict[str, VoteRecord]]
