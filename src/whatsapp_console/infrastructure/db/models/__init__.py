"""Import all models so Base.metadata sees every table."""
from whatsapp_console.infrastructure.db.models.conversation import ConversationModel
from whatsapp_console.infrastructure.db.models.message import MessageModel
from whatsapp_console.infrastructure.db.models.settings import GatewaySettingsModel

__all__ = [
    "ConversationModel",
    "GatewaySettingsModel",
    "MessageModel",
]
