import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_gateway
from app.middleware.error import upstream_error_detail
from app.models.schemas import ImproveWritingRequest, ImproveWritingResponse
from app.services import writer
from app.utils.llm_client import GeminiClient
from app.utils.logger import (
    log_error_with_trace,
    log_operation_end,
    log_operation_start,
    logger,
)

router = APIRouter()


@router.post("/improve-writing", response_model=ImproveWritingResponse)
async def improve_writing(
    req: Optional[ImproveWritingRequest] = None,
    gateway: GeminiClient = Depends(get_gateway),
):
    start_time = time.time()
    if req is None:
        req = ImproveWritingRequest()
    content = req.prompt or req.text

    if not content or not req.aspect:
        logger.warning("improve_writing rejected: content or aspect missing")
        raise HTTPException(
            status_code=400,
            detail="Content to improve and writing aspect are required",
        )

    log_operation_start(
        "improve_writing",
        metadata={
            "aspect": req.aspect,
            "content_length": len(content),
            "has_context": req.context is not None,
        },
    )

    try:
        improved = await writer.improve_writing(gateway, content, req.context)
    except Exception as e:
        log_error_with_trace(
            "improve_writing",
            e,
            metadata={"aspect": req.aspect, "upstream": upstream_error_detail(e)},
        )
        raise HTTPException(status_code=500, detail="Failed to improve writing")

    duration = (time.time() - start_time) * 1000
    log_operation_end(
        "improve_writing",
        duration,
        metadata={"input_length": len(content), "output_length": len(improved)},
    )

    # Echo of the requested aspect, not a diff
    return ImproveWritingResponse(improved=improved, changes=[req.aspect])
