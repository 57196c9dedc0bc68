"""Small string helpers shared by the registry and configuration."""

from collections.abc import Iterable


def non_blank(value: str | None) -> bool:
    """Return True if value has at least one non-whitespace character."""
    return value is not None and value.strip() != ""


def filter_blank(values: Iterable[str | None] | None) -> list[str]:
    """Drop blank entries and strip the rest, keeping order."""
    if values is None:
        return []
    return [v.strip() for v in values if non_blank(v)]  # type: ignore[union-attr]
