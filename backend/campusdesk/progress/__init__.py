"""Lesson progress tracking."""
from .service import ProgressService, progress_percentage
from .router import router as progress_router

__all__ = ['ProgressService', 'progress_percentage', 'progress_router']
