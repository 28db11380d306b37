"""campusdesk: grading, progress tracking and finance back-office API."""

__version__ = "0.1.0"
