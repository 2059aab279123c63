# Authentication module

from app.modules.auth.dependencies import (
    get_current_user,
    get_current_admin,
    get_optional_user,
)
from app.modules.auth.recaptcha import verify_recaptcha

__all__ = [
    "get_current_user",
    "get_current_admin",
    "get_optional_user",
    "verify_recaptcha",
]
