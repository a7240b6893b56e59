"""Domain models - records exchanged with the CollegeHub backend."""

from .booking import Booking
from .college import College
from .review import Review
from .session import Session
from .user import User

__all__ = ["Booking", "College", "Review", "Session", "User"]
