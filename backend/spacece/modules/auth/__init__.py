# Authentication module

from spacece.modules.auth.dependencies import (
    get_caller,
    require_permission,
)

__all__ = [
    "get_caller",
    "require_permission",
]
