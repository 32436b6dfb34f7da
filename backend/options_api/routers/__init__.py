"""
HTTP routers.

- options: build_option_router() per registered kind, plus the /api/options index
- health: /api/health and /api/health/detailed
"""

from .health import router as health_router
from .options import build_option_router, index_router, register_option_routers

__all__ = [
    "health_router",
    "build_option_router",
    "index_router",
    "register_option_routers",
]
