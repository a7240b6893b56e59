"""
Unit tests for domain models and their wire-format conversion.
"""

import json

from collegehub.domain import Booking, College, Review, Session, User
from collegehub.domain.booking import STATUS_APPROVED


class TestIdentifierNormalization:
    def test_records_expect_normalized_ids(self):
        user = User.from_dict({"id": "u1", "name": "Jane", "email": "jane@example.com"})

        assert user.id == "u1"
        assert user.to_dict() == {"id": "u1", "name": "Jane", "email": "jane@example.com"}

    def test_stray_legacy_id_is_not_reinterpreted(self):
        user = User.from_dict({"_id": "u1", "email": "a@b.co"})

        assert user.id is None
        assert user.extra_fields == {"_id": "u1"}

    def test_cached_user_is_normalized_on_read(self):
        user = Session.deserialize_user(json.dumps({"_id": "u1", "name": "Jane", "email": "j@x.io"}))

        assert user.id == "u1"
        assert "_id" not in user.extra_fields

    def test_cached_user_existing_id_wins(self):
        user = Session.deserialize_user(json.dumps({"_id": "legacy", "id": "canonical", "email": "a@b.co"}))

        assert user.id == "canonical"


class TestUser:
    def test_camel_case_and_extras(self):
        user = User.from_dict(
            {"id": "u1", "name": "Jane", "email": "j@x.io", "createdAt": "2025-01-05", "role": "student"}
        )

        assert user.created_at == "2025-01-05"
        assert user.extra_fields == {"role": "student"}
        assert user.get_field("createdAt") == "2025-01-05"
        assert user.get_field("role") == "student"
        assert user.get_field("missing", "fallback") == "fallback"

    def test_to_dict_without_extras(self):
        user = User(id="u1", name="Jane", email="j@x.io", extra_fields={"role": "student"})

        assert "role" not in user.to_dict(include_extra=False)
        assert user.to_dict()["role"] == "student"


class TestCollege:
    def test_embedded_reviews_become_records(self):
        college = College.from_dict(
            {
                "id": "c1",
                "name": "Tech Institute",
                "tuitionFee": 52000,
                "reviews": [{"id": "r1", "rating": 5, "comment": "Great", "userName": "Jane"}],
            }
        )

        assert college.tuition_fee == 52000
        assert isinstance(college.reviews[0], Review)
        assert college.reviews[0].id == "r1"
        assert college.reviews[0].user_name == "Jane"

    def test_reviews_absent_by_default(self):
        assert College.from_dict({"id": "c1", "name": "X"}).reviews is None

    def test_to_dict_exports_nested_reviews(self):
        college = College(id="c1", name="X", reviews=[Review(id="r1", rating=4, comment="ok")])

        exported = college.to_dict()

        assert exported["reviews"] == [{"id": "r1", "rating": 4, "comment": "ok", "userName": ""}]


class TestBooking:
    PAYLOAD = {
        "id": "b1",
        "studentName": "Jane Smith",
        "email": "jane@example.com",
        "phone": "5551234567",
        "course": "Physics",
        "previousEducation": "High School",
        "grade": "A",
        "address": "1 Main St",
    }

    def test_college_id_as_identifier(self):
        booking = Booking.from_dict(dict(self.PAYLOAD, collegeId="c1"))

        assert booking.college_ref_id == "c1"
        assert booking.college is None
        assert booking.student_name == "Jane Smith"
        assert booking.is_pending()

    def test_college_id_as_embedded_record(self):
        booking = Booking.from_dict(
            dict(self.PAYLOAD, collegeId={"id": "c1", "name": "Tech Institute"}, status=STATUS_APPROVED)
        )

        assert isinstance(booking.college, College)
        assert booking.college.name == "Tech Institute"
        assert booking.college_ref_id == "c1"
        assert not booking.is_pending()

    def test_to_dict_uses_wire_keys(self):
        booking = Booking(college_id="c1", student_name="Jane", course="Physics", guardian_name="Pat")

        exported = booking.to_dict(include_extra=False)

        assert exported["collegeId"] == "c1"
        assert exported["studentName"] == "Jane"
        assert exported["guardianName"] == "Pat"
        assert "guardianPhone" not in exported
        assert exported["status"] == "pending"

    def test_unknown_keys_round_trip(self):
        booking = Booking.from_dict(dict(self.PAYLOAD, collegeId="c1", reviewedBy="admin"))

        assert booking.to_dict()["reviewedBy"] == "admin"
