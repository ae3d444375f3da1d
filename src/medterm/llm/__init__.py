"""Suggestion provider implementations for MedTerm."""

from .client import (
    FakeSuggestionProvider,
    RealSuggestionProvider,
    SuggestionProvider,
    SuggestionProviderError,
    get_suggestion_provider,
    parse_json_text,
)

__all__ = [
    "SuggestionProvider",
    "FakeSuggestionProvider",
    "RealSuggestionProvider",
    "SuggestionProviderError",
    "get_suggestion_provider",
    "parse_json_text",
]
