from questionbank.routers.questions import router as questions_router
from questionbank.routers.admin import router as admin_router

__all__ = ["questions_router", "admin_router"]
