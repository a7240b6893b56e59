"""
Review domain model.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .record import ApiRecord


@dataclass
class Review(ApiRecord):
    """A user's rating (1-5) and comment on a college."""

    FIELD_MAP = {
        "userId": "user_id",
        "collegeId": "college_id",
        "userName": "user_name",
        "createdAt": "created_at",
    }

    rating: float = 0
    comment: str = ""
    id: Optional[str] = None
    user_id: Optional[str] = None
    college_id: Optional[str] = None
    user_name: str = ""
    created_at: Optional[str] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)
