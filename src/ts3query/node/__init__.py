"""Domain model reachable from a query connection."""

from .base import Node
from .host import Host
from .server import Server

__all__ = ["Node", "Host", "Server"]
