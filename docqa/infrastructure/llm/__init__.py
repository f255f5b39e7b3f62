"""Generation backends, listed in default fallback order."""
from .openai_client import OllamaBackend, OpenAIBackend
from .anthropic_client import AnthropicBackend
from .gemini_client import GeminiBackend

__all__ = ["OpenAIBackend", "AnthropicBackend", "GeminiBackend", "OllamaBackend"]
