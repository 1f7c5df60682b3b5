# Routers package
from .auth import router as auth_router
from .timer import router as timer_router
from .live import router as live_router
