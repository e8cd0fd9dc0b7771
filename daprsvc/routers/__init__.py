from .health_routes import router as health_router
from .message_routes import router as message_router
from .subscribe_routes import router as subscribe_router

__all__ = [
    "health_router",
    "message_router",
    "subscribe_router",
]
