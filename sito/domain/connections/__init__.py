"""Connection domain - directional connect requests"""

from .router import router

__all__ = ["router"]
