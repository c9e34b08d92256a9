from .client import ModelUnavailableError, OpenAICompatibleModel, from_settings
from .types import ChatMessage, ChatModel, ImageAttachment

__all__ = [
    "ChatMessage",
    "ChatModel",
    "ImageAttachment",
    "ModelUnavailableError",
    "OpenAICompatibleModel",
    "from_settings",
]
