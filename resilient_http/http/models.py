"""
HTTP Models
===========
Response envelope returned by transports.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class HttpResponse(Generic[T]):
    """Transport envelope. The client surfaces only ``body`` to callers."""
    status: int
    body: Optional[T] = None
    headers: Dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None

