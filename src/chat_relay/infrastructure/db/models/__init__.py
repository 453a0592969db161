"""Import all models so Base.metadata.create_all sees them."""
from chat_relay.infrastructure.db.models.message import MessageModel

__all__ = [
    "MessageModel",
]
