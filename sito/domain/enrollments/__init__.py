"""Enrollment domain - course interest and enrollment registrar"""

from .router import router

__all__ = ["router"]
