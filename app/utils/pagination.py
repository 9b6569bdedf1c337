"""
Offset pagination helpers.

page and limit arrive as raw query strings. Anything that is not a
positive integer falls back to the default instead of failing the
request, and limit is capped at the configured maximum.

Values bound into SQL (offsets, row ids) must fit a signed 64-bit
integer; larger ones are rejected by the driver.
"""

import math
from dataclasses import dataclass

MAX_SQL_INTEGER = 2**63 - 1


def fits_sql_integer(value: int) -> bool:
    """True if value can be bound as a SQL INTEGER/BIGINT parameter."""
    return -MAX_SQL_INTEGER - 1 <= value <= MAX_SQL_INTEGER


def parse_positive_int(value: object, default: int) -> int:
    """Parse value as an integer >= 1, or return default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 1 else default


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        """Rows to skip: page 1 → 0, page 2 → limit, ..."""
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def parse_page_params(
    page: object,
    limit: object,
    default_limit: int,
    max_limit: int,
) -> PageRequest:
    """
    Build a PageRequest from raw query values.

    page is capped so that its offset still fits MAX_SQL_INTEGER; any
    such page lies far past the last row and comes back empty.
    """
    limit = min(parse_positive_int(limit, default_limit), max_limit)
    last_page = MAX_SQL_INTEGER // limit + 1
    return PageRequest(
        page=min(parse_positive_int(page, 1), last_page),
        limit=limit,
    )
