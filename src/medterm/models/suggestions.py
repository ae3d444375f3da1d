"""Models for machine-suggested translations.

Each of the three suggestion slots is decided once at ingestion: either a
``SlotPresent`` carrying both a term and a context, or a ``SlotMissing``.
Downstream code never re-checks individual fields.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from .votes import Category


@dataclass(frozen=True)
class SlotPresent:
    term: str
    context: str


@dataclass(frozen=True)
class SlotMissing:
    reason: str = "missing"


SuggestionSlot = Union[SlotPresent, SlotMissing]

# Priority order used for ranking and deduplication.
SLOT_PRIORITY: tuple[tuple[str, Category], ...] = (
    ("clinical", Category.CLINICAL),
    ("literal", Category.LITERAL),
    ("descriptive", Category.DESCRIPTIVE),
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_slot(raw: Any) -> SuggestionSlot:
    """Turn one raw slot object into a present or missing slot."""
    if not isinstance(raw, dict):
        return SlotMissing("slot absent")
    term = _text(raw.get("term"))
    context = _text(raw.get("context"))
    if not term and not context:
        return SlotMissing("term and context missing")
    if not term:
        return SlotMissing("term missing")
    if not context:
        return SlotMissing("context missing")
    return SlotPresent(term=term, context=context)


@dataclass(frozen=True)
class ExternalSuggestions:
    """Suggestion set returned by an external provider."""

    literal: SuggestionSlot = SlotMissing()
    clinical: SuggestionSlot = SlotMissing()
    descriptive: SuggestionSlot = SlotMissing()
    correction: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any) -> "ExternalSuggestions":
        """Build from a decoded provider response; tolerates partial payloads."""
        if not isinstance(data, dict):
            return cls()
        correction = _text(data.get("correction")) or None
        return cls(
            literal=parse_slot(data.get("literal")),
            clinical=parse_slot(data.get("clinical")),
            descriptive=parse_slot(data.get("descriptive")),
            correction=correction,
        )

    def slot(self, name: str) -> SuggestionSlot:
        return getattr(self, name)

    def slots_by_priority(self) -> list[tuple[str, Category, SuggestionSlot]]:
        return [(name, category, self.slot(name)) for name, category in SLOT_PRIORITY]

    def has_any(self) -> bool:
        return any(isinstance(slot, SlotPresent) for _, _, slot in self.slots_by_priority())
