"""Appointment domain - bookable time slots"""

from .router import router

__all__ = ["router"]
