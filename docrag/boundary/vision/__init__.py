from docrag.boundary.vision.gemini_vision import GeminiVisionService

__all__ = ["GeminiVisionService"]
