from .groq_client import chat_json, LLMError

__all__ = ["chat_json", "LLMError"]
