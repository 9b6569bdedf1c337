"""
Ratings Service

Pure rating aggregation over a collection of reviews.

Nothing here is stored: average rating, review count and the per-star
distribution are recomputed from the reviews every time a book, a book
list or a profile is read. The functions accept any iterable of objects
with an integer ``rating`` attribute (ORM rows or schemas) and never
touch the database.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.schemas.book import BookResponse

RATING_VALUES = (1, 2, 3, 4, 5)


class Rated(Protocol):
    rating: int


def round_to_tenth(value: float) -> float:
    """
    Round to one decimal place, halves rounding up.

    Python's round() rounds halves to even (round(42.5) == 42), which
    would report 4.25 as 4.2. Ratings are positive, so flooring
    value * 10 + 0.5 gives the conventional result (4.25 -> 4.3).
    """
    return math.floor(value * 10 + 0.5) / 10


def average_rating(reviews: Sequence[Rated]) -> float:
    """
    Mean rating rounded to one decimal place.

    Returns:
        0 when there are no reviews

    Example:
        >>> average_rating([Review(rating=5), Review(rating=4), Review(rating=4)])
        4.3
    """
    if not reviews:
        return 0.0
    mean = sum(review.rating for review in reviews) / len(reviews)
    return round_to_tenth(mean)


def rating_distribution(reviews: Iterable[Rated]) -> dict[int, int]:
    """
    Count reviews per star rating.

    All five buckets are always present, so the values sum to the
    number of reviews.
    """
    distribution = dict.fromkeys(RATING_VALUES, 0)
    for review in reviews:
        distribution[review.rating] += 1
    return distribution


def enrich_book(book: Any, reviews: Sequence[Rated]) -> dict[str, Any]:
    """
    Return the book's fields plus average_rating and review_count.

    The book itself is not modified.
    """
    data = BookResponse.model_validate(book).model_dump()
    data["average_rating"] = average_rating(reviews)
    data["review_count"] = len(reviews)
    return data


@dataclass
class RatingStats:
    """Average, count and distribution for one set of reviews."""

    average_rating: float
    review_count: int
    rating_distribution: dict[int, int] = field(default_factory=dict)


def rating_stats(reviews: Sequence[Rated]) -> RatingStats:
    """Average rating, review count and distribution for one set of reviews."""
    return RatingStats(
        average_rating=average_rating(reviews),
        review_count=len(reviews),
        rating_distribution=rating_distribution(reviews),
    )
