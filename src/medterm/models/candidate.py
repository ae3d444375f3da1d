"""Pydantic model for a ranked translation candidate."""

from pydantic import BaseModel, Field

from .votes import Category, Origin

SELECT_MULTIPLIER = 100


class Candidate(BaseModel):
    """A translation option shown for one lookup.

    Rebuilt on every lookup from external suggestions and vote history;
    never persisted directly.
    """

    id: str = Field(description="History key if one matches, else the suggested term")
    term: str = Field(description="Display text")
    context: str = Field(default="", description="Short definition")
    category: Category
    selects: int = Field(default=0, ge=0)
    rejects: int = Field(default=0, ge=0)
    origin: Origin

    @property
    def score(self) -> int:
        # Any single select outweighs the full category weight spread.
        return self.selects * SELECT_MULTIPLIER + self.category.weight
