# app/utils/reference_data.py
"""Static lookups for vehicle forms."""

from datetime import date
from typing import Optional


def years_descending(from_year: int = 1990, to_year: Optional[int] = None) -> list[int]:
    """Model years for the year dropdown, newest first. Defaults to next year down to 1990."""
    if to_year is None:
        to_year = date.today().year + 1
    return list(range(to_year, from_year - 1, -1))
