"""
Authenticated identity passed explicitly into every service mutation.
"""

from dataclasses import dataclass

from app.models import User


@dataclass(frozen=True)
class Identity:
    """Who is acting: the user id that ownership is checked against and
    the username copied onto newly created books and reviews."""

    user_id: int
    username: str

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(user_id=user.id, username=user.username)
