"""Validation of user-submitted translations."""

import re

_CHINESE_RE = re.compile(r"[\u4e00-\u9fa5]")


class InvalidUserSuggestion(ValueError):
    """A submitted translation was rejected before reaching the ledger."""
    pass


def contains_chinese(text: str) -> bool:
    return bool(_CHINESE_RE.search(text))


def validate_user_suggestion(search_term: str, suggestion: str) -> str:
    """Check that a suggestion is written in the other script of the search.

    Chinese searches take English suggestions and vice versa. English
    suggestions are returned with their first letter capitalized.

    Raises:
        InvalidUserSuggestion: With a message fit to show the user
    """
    raw = suggestion.strip()
    if not raw:
        raise InvalidUserSuggestion("Please enter a translation.")

    search_is_chinese = contains_chinese(search_term)
    suggestion_is_chinese = contains_chinese(raw)

    if search_is_chinese and suggestion_is_chinese:
        raise InvalidUserSuggestion("Input is Chinese. Please suggest an English translation.")
    if not search_is_chinese and not suggestion_is_chinese:
        raise InvalidUserSuggestion("Input is English. Please suggest a Chinese translation.")

    if not suggestion_is_chinese:
        return raw[0].upper() + raw[1:]
    return raw
