from typing import Any, Optional


class HttpStatusError(Exception):
    """Base exception for failed requests. ``status`` drives retry decisions."""
    def __init__(self, message: str, status: int = 0, url: Optional[str] = None, details: Any = None):
        self.message = message
        self.status = status
        self.url = url
        self.details = details
        super().__init__(f"{message} (Status: {status}, URL: {url})")

class NetworkError(HttpStatusError):
    """Raised when the server could not be reached. Carries status 0."""
    pass

class RequestTimeoutError(HttpStatusError):
    """Raised on client-side timeouts. Carries status 408."""
    pass

class ServiceUnavailableError(HttpStatusError):
    """Raised on 5xx responses."""
    pass

class AuthenticationError(HttpStatusError):
    """Raised on 401/403 responses."""
    pass

class NotFoundError(HttpStatusError):
    """Raised when the requested resource is not found (404)."""
    pass

class ValidationError(HttpStatusError):
    """Raised when the server rejects the payload (422)."""
    pass
