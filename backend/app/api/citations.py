import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_gateway
from app.middleware.error import upstream_error_detail
from app.models.schemas import FetchCitationsRequest, FetchCitationsResponse
from app.services import writer
from app.utils.llm_client import GeminiClient
from app.utils.logger import (
    log_error_with_trace,
    log_operation_end,
    log_operation_start,
    logger,
)

router = APIRouter()


@router.post("/fetch-citations", response_model=FetchCitationsResponse)
async def fetch_citations(
    req: Optional[FetchCitationsRequest] = None,
    gateway: GeminiClient = Depends(get_gateway),
):
    start_time = time.time()
    if req is None:
        req = FetchCitationsRequest()

    # TODO: decide whether a missing topic should be a 400 like /generate-paper
    if not req.topic:
        logger.warning("fetch_citations called without a topic")

    log_operation_start("fetch_citations", metadata={"topic": req.topic})

    try:
        citations = await writer.fetch_citations(gateway, req.topic)
    except Exception as e:
        log_error_with_trace(
            "fetch_citations",
            e,
            metadata={"topic": req.topic, "upstream": upstream_error_detail(e)},
        )
        raise HTTPException(status_code=500, detail="Failed to fetch citations")

    duration = (time.time() - start_time) * 1000
    log_operation_end(
        "fetch_citations", duration, metadata={"citations_count": len(citations)}
    )
    logger.info(
        f"Citations parsed: {len(citations)} total, "
        f"{sum(1 for c in citations if c.year)} with year"
    )

    return FetchCitationsResponse(citations=citations)
