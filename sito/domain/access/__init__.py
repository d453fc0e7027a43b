"""Access domain - eligibility resolution for content and offerings"""

from .router import content_router, router

__all__ = ["router", "content_router"]
