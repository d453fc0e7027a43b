"""Questionnaire domain - dynamic intake forms gating transactions"""

from .router import router

__all__ = ["router"]
