"""
College domain model.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .record import ApiRecord
from .review import Review


@dataclass
class College(ApiRecord):
    """
    A college listing with its catalog attributes.

    `reviews` is only populated when the backend embeds them in the detail
    response.
    """

    FIELD_MAP = {"tuitionFee": "tuition_fee", "createdAt": "created_at"}

    name: str = ""
    id: Optional[str] = None
    location: str = ""
    description: str = ""
    rating: float = 0.0
    image: str = ""
    type: str = ""
    established: Optional[int] = None
    affiliations: List[str] = field(default_factory=list)
    courses: List[str] = field(default_factory=list)
    facilities: List[str] = field(default_factory=list)
    tuition_fee: Optional[float] = None
    gallery: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    reviews: Optional[List[Review]] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _convert_field(cls, attribute: str, value: Any) -> Any:
        if attribute == "reviews" and isinstance(value, list):
            return [Review.from_dict(r) if isinstance(r, dict) else r for r in value]
        return value
