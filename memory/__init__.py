from awb.memory.conversation_store import DEFAULT_MAX_MESSAGES, ConversationStore

__all__ = [
    "ConversationStore",
    "DEFAULT_MAX_MESSAGES",
]
