"""Validation rules for the add/edit news forms."""

from __future__ import annotations

from pydantic import AnyUrl, TypeAdapter, ValidationError

from newsdesk.schemas.news import NewsType

MIN_CONTENT_NAME_LENGTH = 3

VALID_NEWS_TYPES = frozenset(t.value for t in NewsType)

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_url(value: str) -> bool:
    """True when ``value`` parses as an absolute URL."""
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_news_form(
    news_type: str | None,
    content_name: str | None,
    content_url: str | None,
) -> str | None:
    """Return the first validation error message, or None if the form is valid.

    Rules run in a fixed order and stop at the first failure.
    """
    if not news_type or not content_name or not content_url:
        return "All fields are required"

    if news_type not in VALID_NEWS_TYPES:
        return "Invalid type selected"

    if not is_valid_url(content_url):
        return "Please enter a valid URL"

    if len(content_name.strip()) < MIN_CONTENT_NAME_LENGTH:
        return f"Content name must be at least {MIN_CONTENT_NAME_LENGTH} characters"

    return None
