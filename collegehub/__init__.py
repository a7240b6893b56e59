"""CollegeHub client: REST request layer and session context."""

__version__ = "0.1.0"
