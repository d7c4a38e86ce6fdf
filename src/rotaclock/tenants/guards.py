from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import ApiUser
from .service import AuthService


def current_user() -> ApiUser:
    return g.api_user


def make_guards(auth_service: AuthService) -> tuple[Callable, Callable]:
    """Build the ``login_required`` and ``roles_required`` decorators for a controller."""

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.api_user = auth_service.authenticate(
                authorization=request.headers.get("Authorization"),
                employee_header=request.headers.get("X-Employee-ID"),
                tenant_header=request.headers.get("X-Tenant-ID"),
            )
            return view(*args, **kwargs)

        return wrapper

    def roles_required(*roles: Role):
        allowed = set(roles)

        def decorator(view):
            @wraps(view)
            @login_required
            def wrapper(*args, **kwargs):
                if current_user().role not in allowed:
                    raise AuthorizationError("Insufficient permissions")
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return login_required, roles_required
