"""HTTP layer: routers, middleware, session cookies and request dependencies."""

from stickerpacks.api.auth_routes import auth_router
from stickerpacks.api.routes import router

__all__ = ["auth_router", "router"]
