from .client import ResilientHttpClient, generate_call_id
from .exceptions import (
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    ServiceUnavailableError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from .models import HttpResponse
from .transport import HttpTransport, HttpxTransport

__all__ = [
    "ResilientHttpClient",
    "generate_call_id",
    "HttpStatusError",
    "NetworkError",
    "RequestTimeoutError",
    "ServiceUnavailableError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "HttpResponse",
    "HttpTransport",
    "HttpxTransport",
]
