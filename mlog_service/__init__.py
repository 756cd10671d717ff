from .gemini import GeminiClient
from .server import create_app

__all__ = ["GeminiClient", "create_app"]
