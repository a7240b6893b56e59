"""
CollegeHub command line client

Browse colleges, submit admission bookings, write reviews and manage the
signed-in profile. All account state goes through SessionContext; this
module never touches the stored session directly.

Usage:
    collegehub login --email jane@example.com
    collegehub colleges --type University --sort-by rating
    collegehub book <college-id> --course "Computer Science" ...
"""

import argparse
import getpass
import sys
from typing import Any, Dict, List, Optional

from collegehub.api import APIError, unwrap_list
from collegehub.auth import SessionContext
from collegehub.config.settings import ConfigurationError, Settings, setup_logging_redaction
from collegehub.constants import APP_DESCRIPTION, APP_NAME, COLLEGE_TYPES, ITEMS_PER_PAGE
from collegehub.database.exceptions import StorageException
from collegehub.domain import Booking, College, Review, User
from collegehub.utils.logger import get_logger
from collegehub.utils.validators import (
    format_currency,
    format_date,
    format_phone_number,
    validate_email,
    validate_password,
    validate_phone,
    validate_rating,
    validate_required,
)

logger = get_logger(__name__)


class InputError(ValueError):
    """Raised when command line input fails local validation."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise InputError(message)


def _print_college_summary(college: College) -> None:
    fee = f"  {format_currency(college.tuition_fee)}/yr" if college.tuition_fee else ""
    print(f"[{college.id}] {college.name} ({college.type or 'n/a'})")
    print(f"    {college.location}  rating {college.rating:.1f}{fee}")


def _format_when(value: str) -> str:
    try:
        return format_date(value)
    except ValueError:
        return value


def _print_review(review: Review) -> None:
    when = f" on {_format_when(review.created_at)}" if review.created_at else ""
    print(f"  {review.rating}/5 by {review.user_name or 'anonymous'}{when}")
    if review.comment:
        print(f"    {review.comment}")


def _print_booking(booking: Booking) -> None:
    college = booking.college
    college_label = college.name if college else booking.college_ref_id
    print(f"[{booking.id}] {college_label} - {booking.course} ({booking.status})")
    print(f"    {booking.student_name}, {booking.email}, {format_phone_number(booking.phone)}")


def _print_user(user: User) -> None:
    print(f"{user.name} <{user.email}>")
    if user.phone:
        print(f"  phone:   {format_phone_number(user.phone)}")
    if user.address:
        print(f"  address: {user.address}")


def _require_login(context: SessionContext) -> None:
    _require(context.is_authenticated, "Not signed in. Run 'collegehub login' first.")


def cmd_login(context: SessionContext, args: argparse.Namespace) -> int:
    _require(validate_email(args.email), "Please enter a valid email address.")
    password = args.password or getpass.getpass("Password: ")
    if not context.login(args.email, password):
        print(f"Login failed: {context.last_error}", file=sys.stderr)
        return 1
    print(f"Signed in as {context.user.name or context.user.email}")
    return 0


def cmd_signup(context: SessionContext, args: argparse.Namespace) -> int:
    _require(validate_required(args.name), "Name is required.")
    _require(validate_email(args.email), "Please enter a valid email address.")
    password = args.password or getpass.getpass("Password: ")
    _require(validate_password(password), "Password must be at least 6 characters.")
    if args.phone:
        _require(validate_phone(args.phone), "Please enter a valid phone number.")

    if not context.signup(args.name, args.email, password, phone=args.phone, address=args.address):
        print(f"Sign up failed: {context.last_error}", file=sys.stderr)
        return 1
    print(f"Welcome to {APP_NAME}, {context.user.name}!")
    return 0


def cmd_logout(context: SessionContext, args: argparse.Namespace) -> int:
    context.logout()
    print("Signed out.")
    return 0


def cmd_forgot_password(context: SessionContext, args: argparse.Namespace) -> int:
    _require(validate_email(args.email), "Please enter a valid email address.")
    payload = context.api.auth.forgot_password(args.email)
    print(f"Password reset requested for {args.email}.")
    token = payload.get("token") if isinstance(payload, dict) else None
    if token:
        print(f"Reset token: {token}")
        print(f"Run: collegehub reset-password --token {token}")
    return 0


def cmd_reset_password(context: SessionContext, args: argparse.Namespace) -> int:
    _require(validate_required(args.token), "Invalid or missing token.")
    password = args.password or getpass.getpass("New password: ")
    _require(validate_password(password), "Password must be at least 6 characters.")
    confirm = args.confirm_password or getpass.getpass("Confirm password: ")
    _require(password == confirm, "Passwords do not match.")
    context.api.auth.reset_password(args.token, password)
    print("Password reset. You can now sign in.")
    return 0


def cmd_whoami(context: SessionContext, args: argparse.Namespace) -> int:
    if not context.is_authenticated:
        print("Not signed in.")
        return 1
    _print_user(context.user)
    return 0


def cmd_profile(context: SessionContext, args: argparse.Namespace) -> int:
    _require_login(context)
    changes: Dict[str, Any] = {}
    if args.name is not None:
        _require(validate_required(args.name), "Name cannot be empty.")
        changes["name"] = args.name
    if args.phone is not None:
        _require(validate_phone(args.phone), "Please enter a valid phone number.")
        changes["phone"] = args.phone
    if args.address is not None:
        changes["address"] = args.address
    if args.new_password:
        _require(validate_password(args.new_password), "Password must be at least 6 characters.")
        changes["current_password"] = args.current_password or getpass.getpass("Current password: ")
        changes["new_password"] = args.new_password

    if changes:
        if not context.update_profile(**changes):
            print(f"Profile update failed: {context.last_error}", file=sys.stderr)
            return 1
        print("Profile updated.")

    _print_user(context.user)
    return 0


def cmd_colleges(context: SessionContext, args: argparse.Namespace) -> int:
    payload = context.api.colleges.get_all(
        search=args.search,
        college_type=args.type,
        min_rating=args.min_rating,
        sort_by=args.sort_by,
    )
    colleges = [College.from_dict(c) for c in unwrap_list(payload, "colleges")]
    if not colleges:
        print("No colleges found.")
        return 0

    start = (args.page - 1) * ITEMS_PER_PAGE
    page = colleges[start : start + ITEMS_PER_PAGE]
    for college in page:
        _print_college_summary(college)
    total_pages = (len(colleges) + ITEMS_PER_PAGE - 1) // ITEMS_PER_PAGE
    print(f"Page {args.page}/{total_pages} ({len(colleges)} colleges)")
    return 0


def cmd_college(context: SessionContext, args: argparse.Namespace) -> int:
    payload = context.api.colleges.get_by_id(args.college_id)
    if not isinstance(payload, dict):
        print("College not found.", file=sys.stderr)
        return 1
    college = College.from_dict(payload.get("college", payload))
    _print_college_summary(college)
    if college.established:
        print(f"    Established {college.established}")
    if college.description:
        print(f"\n{college.description}\n")
    for label, values in (
        ("Courses", college.courses),
        ("Facilities", college.facilities),
        ("Affiliations", college.affiliations),
    ):
        if values:
            print(f"{label}: {', '.join(values)}")

    reviews = college.reviews
    if reviews is None:
        reviews = [
            Review.from_dict(r)
            for r in unwrap_list(context.api.reviews.get_by_college(args.college_id), "reviews")
        ]
    print(f"\nReviews ({len(reviews)}):")
    for review in reviews:
        _print_review(review)
    return 0


def cmd_book(context: SessionContext, args: argparse.Namespace) -> int:
    _require_login(context)
    user = context.user
    email = args.email or user.email
    phone = args.phone or user.phone or ""
    address = args.address or user.address or ""

    _require(validate_email(email), "Please enter a valid email address.")
    _require(validate_phone(phone), "Please enter a valid phone number.")
    for value, label in (
        (args.course, "Course"),
        (args.previous_education, "Previous education"),
        (args.grade, "Grade"),
        (address, "Address"),
    ):
        _require(validate_required(value or ""), f"{label} is required.")
    if args.guardian_phone:
        _require(validate_phone(args.guardian_phone), "Please enter a valid guardian phone number.")

    booking = Booking(
        college_id=args.college_id,
        student_name=args.student_name or user.name,
        email=email,
        phone=phone,
        course=args.course,
        previous_education=args.previous_education,
        grade=args.grade,
        address=address,
        guardian_name=args.guardian_name,
        guardian_phone=args.guardian_phone,
    )
    payload = booking.to_dict(include_extra=False)
    payload.pop("status", None)

    created = context.api.bookings.create(payload)
    if isinstance(created, dict):
        _print_booking(Booking.from_dict(created.get("booking", created)))
    print("Admission application submitted.")
    return 0


def cmd_bookings(context: SessionContext, args: argparse.Namespace) -> int:
    _require_login(context)
    bookings = [Booking.from_dict(b) for b in unwrap_list(context.api.bookings.get_all(), "bookings")]
    if args.status:
        bookings = [b for b in bookings if b.status == args.status]
    if not bookings:
        print("No bookings yet.")
        return 0
    for booking in bookings:
        _print_booking(booking)
    return 0


def cmd_reviews(context: SessionContext, args: argparse.Namespace) -> int:
    if args.college:
        payload = context.api.reviews.get_by_college(args.college)
    else:
        _require_login(context)
        payload = context.api.reviews.get_by_user()
    reviews = [Review.from_dict(r) for r in unwrap_list(payload, "reviews")]
    if not reviews:
        print("No reviews yet.")
        return 0
    for review in reviews:
        _print_review(review)
    return 0


def cmd_review(context: SessionContext, args: argparse.Namespace) -> int:
    _require_login(context)
    _require(validate_rating(args.rating), "Rating must be between 1 and 5.")
    _require(validate_required(args.comment), "Comment is required.")
    created = context.api.reviews.create(args.college_id, args.rating, args.comment)
    if isinstance(created, dict):
        _print_review(Review.from_dict(created.get("review", created)))
    print("Review posted.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="collegehub", description=APP_DESCRIPTION)
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Keep the session in memory only for this run",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in")
    p.add_argument("--email", required=True)
    p.add_argument("--password")
    p.set_defaults(func=cmd_login)

    p = sub.add_parser("signup", help="Create an account")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password")
    p.add_argument("--phone")
    p.add_argument("--address")
    p.set_defaults(func=cmd_signup)

    p = sub.add_parser("logout", help="Sign out")
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser("forgot-password", help="Request a password reset token")
    p.add_argument("--email", required=True)
    p.set_defaults(func=cmd_forgot_password)

    p = sub.add_parser("reset-password", help="Set a new password with a reset token")
    p.add_argument("--token", required=True)
    p.add_argument("--password")
    p.add_argument("--confirm-password")
    p.set_defaults(func=cmd_reset_password)

    p = sub.add_parser("whoami", help="Show the signed-in user")
    p.set_defaults(func=cmd_whoami)

    p = sub.add_parser("profile", help="Show or update your profile")
    p.add_argument("--name")
    p.add_argument("--phone")
    p.add_argument("--address")
    p.add_argument("--current-password")
    p.add_argument("--new-password")
    p.set_defaults(func=cmd_profile)

    p = sub.add_parser("colleges", help="Browse colleges")
    p.add_argument("--search")
    p.add_argument("--type", choices=COLLEGE_TYPES)
    p.add_argument("--min-rating", type=float)
    p.add_argument("--sort-by")
    p.add_argument("--page", type=int, default=1)
    p.set_defaults(func=cmd_colleges)

    p = sub.add_parser("college", help="Show college details and reviews")
    p.add_argument("college_id")
    p.set_defaults(func=cmd_college)

    p = sub.add_parser("book", help="Apply for admission")
    p.add_argument("college_id")
    p.add_argument("--course", required=True)
    p.add_argument("--previous-education", required=True)
    p.add_argument("--grade", required=True)
    p.add_argument("--student-name")
    p.add_argument("--email")
    p.add_argument("--phone")
    p.add_argument("--address")
    p.add_argument("--guardian-name")
    p.add_argument("--guardian-phone")
    p.set_defaults(func=cmd_book)

    p = sub.add_parser("bookings", help="List your admission bookings")
    p.add_argument("--status", choices=("pending", "approved", "rejected"))
    p.set_defaults(func=cmd_bookings)

    p = sub.add_parser("reviews", help="List your reviews or a college's reviews")
    p.add_argument("--college")
    p.set_defaults(func=cmd_reviews)

    p = sub.add_parser("review", help="Review a college")
    p.add_argument("college_id")
    p.add_argument("--rating", type=int, required=True)
    p.add_argument("--comment", required=True)
    p.set_defaults(func=cmd_review)

    return parser


def main(argv: Optional[List[str]] = None, context: Optional[SessionContext] = None) -> int:
    """
    CLI entry point.

    Args:
        argv: Argument list (default: sys.argv[1:])
        context: Pre-built SessionContext (default: built from settings)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    if context is None:
        try:
            settings = Settings.load(args.config)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 2
        if args.no_persist:
            settings.session_backend = "memory"
        context = settings.create_session_context()

    setup_logging_redaction(context)

    try:
        context.initialize()
        return args.func(context, args)
    except InputError as e:
        print(str(e), file=sys.stderr)
        return 2
    except APIError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except StorageException as e:
        logger.error("Session storage failure", operation=args.command, error=str(e))
        print(f"Session storage error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
