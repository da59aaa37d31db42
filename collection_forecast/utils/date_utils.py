"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import List, Tuple


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def trailing_window(as_of: date, days: int) -> Tuple[date, date]:
    """(as_of - days, as_of) inclusive bounds of a trailing window"""
    return as_of - timedelta(days=days), as_of
