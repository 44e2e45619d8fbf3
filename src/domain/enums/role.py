from enum import Enum


class Role(str, Enum):
    """Account roles known to the access-control rules."""

    USER = "user"
    AGENT = "agent"
    ADMIN = "admin"
