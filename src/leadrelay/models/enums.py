"""String enums for inbound event discriminators and record statuses."""

from enum import StrEnum


class EventSource(StrEnum):
    NANGO = "nango"


class EventType(StrEnum):
    WEBHOOK = "webhook"
    SYNC = "sync"
    AUTH = "auth"


class ConnectionStatus(StrEnum):
    CONNECTED = "CONNECTED"
    FAILED = "FAILED"


class EventRoute(StrEnum):
    """Handling path chosen for an inbound webhook."""

    PASSTHROUGH = "passthrough"
    SYNC = "sync"
    AUTH = "auth"
    REJECTED = "rejected"
