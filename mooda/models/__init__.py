from .user import User
from .conversation import ConversationMessage, MessageRole
from .emotion_log import Emotion, EmotionLog
from .personality import CustomPersonality

__all__ = [
    "User",
    "ConversationMessage",
    "MessageRole",
    "Emotion",
    "EmotionLog",
    "CustomPersonality",
]
