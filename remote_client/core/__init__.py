from .connection import ConnectionManager, ConnectionState
from .events import Event

__all__ = ["ConnectionManager", "ConnectionState", "Event"]
