"""Competition-year helpers derived from heat dates."""
from __future__ import annotations

from datetime import date
from typing import Sequence

from .types import Heat


def heat_year(heat_id: str, heats: Sequence[Heat]) -> int | None:
    for heat in heats:
        if heat.id == heat_id:
            return heat.year
    return None


def unique_years(heats: Sequence[Heat]) -> list[int]:
    """Distinct years of the given heats, most recent first."""
    return sorted({heat.year for heat in heats if heat.year is not None}, reverse=True)


# Name kept for callers ported from the web client.
get_unique_years_given_heats = unique_years


def default_year(years: Sequence[int], today: date | None = None) -> int:
    """Year a ranking opens on: this year if it has heats, else the latest one."""
    current = (today or date.today()).year
    if not years or current in years:
        return current
    return max(years)


def heats_in_year(heats: Sequence[Heat], year: int) -> list[Heat]:
    return [heat for heat in heats if heat.year == year]


__all__ = [
    "heat_year",
    "unique_years",
    "get_unique_years_given_heats",
    "default_year",
    "heats_in_year",
]
