"""Authentication package for the application."""
from .models import User, Role, Permission, RolePermission, StudentProfile
from .permissions import RoleName, Resource, Action, can
from .service import (
    AuthService, get_current_user, get_current_active_user, get_current_student, require,
)
from .router import router as auth_router

__all__ = [
    'User',
    'Role',
    'Permission',
    'RolePermission',
    'StudentProfile',
    'RoleName',
    'Resource',
    'Action',
    'can',
    'AuthService',
    'get_current_user',
    'get_current_active_user',
    'get_current_student',
    'require',
    'auth_router'
]
