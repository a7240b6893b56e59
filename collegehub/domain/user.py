"""
User domain model.

Represents the authenticated account as returned by /api/auth/* endpoints.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .record import ApiRecord


@dataclass
class User(ApiRecord):
    """
    Account identity attributes.

    Attributes:
        name: Display name
        email: Login email
        id: Canonical identifier (normalized from backend `_id` or `id`)
        phone: Optional phone number
        address: Optional postal address
        avatar: Optional avatar image URL
        created_at: ISO-8601 creation timestamp from the backend
    """

    FIELD_MAP = {"createdAt": "created_at"}

    name: str = ""
    email: str = ""
    id: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[str] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)
