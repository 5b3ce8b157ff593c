from fastapi import Request

from app.utils.llm_client import GeminiClient


def get_gateway(request: Request) -> GeminiClient:
    """The process-wide Gemini client created in app.main."""
    return request.app.state.gateway
