"""Order-preserving removal of duplicate application records."""

from typing import Iterable

from macos_apps.models import AppRecord


def dedupe(records: Iterable[AppRecord]) -> list[AppRecord]:
    """Drop structurally equal records, keeping each first occurrence in place."""
    return list(dict.fromkeys(records))
