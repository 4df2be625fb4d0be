from .user_service import ServiceResult, UserService
from .validation import validate, validate_record

__all__ = [
    "ServiceResult",
    "UserService",
    "validate",
    "validate_record",
]
