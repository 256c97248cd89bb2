"""
CryptoDash Services

Each service has a clear input/output contract.
Services communicate only through defined schemas.
"""

from cryptodash.services.base import (
    BaseService,
    ServiceError,
    ValidationError,
    ExternalAPIError,
    RateLimitError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "ValidationError",
    "ExternalAPIError",
    "RateLimitError",
]
