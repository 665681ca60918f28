"""Transport layer.

Provides line-level I/O for the ServerQuery adapter:
- TCPTransport - socket connection to a query server
- MockTransport - in-memory, for tests and offline use
"""

from .base import Transport, TransportConfig, TransportState
from .mock import STATUS_OK, MockTransport
from .tcp import TCPTransport

__all__ = [
    "Transport",
    "TransportConfig",
    "TransportState",
    "TCPTransport",
    "MockTransport",
    "STATUS_OK",
]
