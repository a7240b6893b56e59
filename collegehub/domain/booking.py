"""
Booking domain model.

Represents an admission application submitted for a college. The backend
returns `collegeId` either as a bare identifier or, on populated queries, as
the embedded college record. Both shapes are kept as received; read the
identifier through `college_ref_id` and the embedded record through
`college` rather than inspecting `college_id` directly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .college import College
from .record import ApiRecord

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


@dataclass
class Booking(ApiRecord):
    """
    Admission application.

    Attributes:
        college_id: College identifier or embedded College record
        student_name: Applicant name
        email: Applicant contact email
        phone: Applicant contact phone
        course: Course applied for
        previous_education: Last completed qualification
        grade: Grade obtained in previous education
        address: Applicant postal address
        guardian_name: Optional guardian name
        guardian_phone: Optional guardian phone
        status: pending, approved or rejected
    """

    FIELD_MAP = {
        "userId": "user_id",
        "collegeId": "college_id",
        "studentName": "student_name",
        "previousEducation": "previous_education",
        "guardianName": "guardian_name",
        "guardianPhone": "guardian_phone",
        "createdAt": "created_at",
    }

    college_id: Union[str, College, None] = None
    student_name: str = ""
    email: str = ""
    phone: str = ""
    course: str = ""
    previous_education: str = ""
    grade: str = ""
    address: str = ""
    id: Optional[str] = None
    user_id: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    status: str = STATUS_PENDING
    created_at: Optional[str] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _convert_field(cls, attribute: str, value: Any) -> Any:
        if attribute == "college_id" and isinstance(value, dict):
            return College.from_dict(value)
        return value

    @property
    def college_ref_id(self) -> Optional[str]:
        """College identifier regardless of whether the college was embedded."""
        if isinstance(self.college_id, College):
            return self.college_id.id
        return self.college_id

    @property
    def college(self) -> Optional[College]:
        """Embedded college record, or None when only the identifier was sent."""
        if isinstance(self.college_id, College):
            return self.college_id
        return None

    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING
