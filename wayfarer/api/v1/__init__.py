"""
API v1 Package
===============

Version 1 API controllers.
"""
from .admin_controller import router as admin_router
from .checkin_controller import router as checkin_router
from .favorite_controller import router as me_router
from .permission_controller import router as permission_router
from .place_controller import router as place_router
from .region_controller import router as region_router
from .report_controller import router as report_router
from .user_controller import router as user_router

__all__ = [
    "admin_router",
    "checkin_router",
    "me_router",
    "permission_router",
    "place_router",
    "region_router",
    "report_router",
    "user_router",
]
