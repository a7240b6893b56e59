"""Application constants shared by the client, CLI and validators."""

APP_NAME = "CollegeHub"
APP_DESCRIPTION = "Discover top colleges and book your admission"

DEFAULT_API_URL = "https://college-admission-five.vercel.app"

ITEMS_PER_PAGE = 12

COLLEGE_TYPES = ("University", "College", "Institute", "Academy")

BOOKING_STATUS = ("pending", "approved", "rejected")

MIN_RATING = 1
MAX_RATING = 5

PASSWORD_MIN_LENGTH = 6

# Durable session keys; only SessionManager reads or writes them
TOKEN_KEY = "authToken"
USER_KEY = "currentUser"
