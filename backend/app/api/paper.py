import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_gateway
from app.middleware.error import upstream_error_detail
from app.models.schemas import (
    FormatPaperRequest,
    FormatPaperResponse,
    GeneratePaperRequest,
    GeneratePaperResponse,
)
from app.services import writer
from app.utils.llm_client import GeminiClient
from app.utils.logger import (
    log_error_with_trace,
    log_operation_end,
    log_operation_start,
    logger,
)

router = APIRouter()


@router.post("/generate-paper", response_model=GeneratePaperResponse)
async def generate_paper(
    req: Optional[GeneratePaperRequest] = None,
    gateway: GeminiClient = Depends(get_gateway),
):
    start_time = time.time()
    # A request without a body is treated like an empty object
    if req is None:
        req = GeneratePaperRequest()

    if not req.topic:
        logger.warning("generate_paper rejected: topic missing")
        raise HTTPException(status_code=400, detail="Topic is required")

    log_operation_start("generate_paper", metadata={"topic": req.topic[:100]})

    try:
        sections = await writer.generate_paper(gateway, req.topic)
    except Exception as e:
        log_error_with_trace(
            "generate_paper",
            e,
            metadata={"topic": req.topic, "upstream": upstream_error_detail(e)},
        )
        raise HTTPException(status_code=500, detail="Failed to generate paper")

    duration = (time.time() - start_time) * 1000
    log_operation_end(
        "generate_paper",
        duration,
        metadata={"sections": list(sections.keys())},
    )

    return GeneratePaperResponse(success=True, paper=sections)


@router.post("/format-paper", response_model=FormatPaperResponse)
async def format_paper(
    req: Optional[FormatPaperRequest] = None,
    gateway: GeminiClient = Depends(get_gateway),
):
    start_time = time.time()
    if req is None:
        req = FormatPaperRequest()

    # paper and style are interpolated as given, even when absent
    log_operation_start("format_paper", metadata={"style": req.style})

    try:
        formatted = await writer.format_paper(gateway, req.paper, req.style)
    except Exception as e:
        log_error_with_trace(
            "format_paper",
            e,
            metadata={"style": req.style, "upstream": upstream_error_detail(e)},
        )
        raise HTTPException(status_code=500, detail="Failed to format paper")

    duration = (time.time() - start_time) * 1000
    log_operation_end(
        "format_paper", duration, metadata={"output_length": len(formatted)}
    )

    return FormatPaperResponse(formattedPaper=formatted)
