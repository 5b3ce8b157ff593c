from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.citations import router as citations_router
from app.api.paper import router as paper_router
from app.api.writing import router as writing_router
from app.core.config import settings
from app.middleware.error import (
    exception_middleware,
    http_exception_handler,
    validation_exception_handler,
)
from app.utils.llm_client import GeminiClient
from app.utils.logger import logger

app = FastAPI(title="Paper Assistant Backend")

# Only the frontend origin may call the backend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

app.middleware("http")(exception_middleware)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(paper_router, tags=["paper"])
app.include_router(citations_router, tags=["citations"])
app.include_router(writing_router, prefix="/api/ai", tags=["writing"])

app.state.gateway = GeminiClient.from_settings(settings)


@app.on_event("startup")
async def announce_startup():
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; provider calls will be rejected")
    logger.info(f"Server running on port {settings.PORT}")


@app.on_event("shutdown")
async def close_gateway():
    await app.state.gateway.aclose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
