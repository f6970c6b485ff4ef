"""Ingestion API router.

Returns ApiResponse[IngestResponse]; request_id is read from request.state
(injected by RequestLogMiddleware). Indexing errors surface through the
AppError handler in src/main.py.
"""

from fastapi import APIRouter, Depends, Request, status

from src.ix_common.response import ApiResponse, success_response
from src.ix_ingest.api.dependencies import get_indexer_context
from src.ix_ingest.application.context import IndexerContext
from src.ix_ingest.application.schemas import IngestRequest
from src.ix_ingest.application.service import ingest_events

router = APIRouter(prefix="/events", tags=["events"])


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Apply a batch of chain events",
)
async def ingest(
    request: Request,
    body: IngestRequest,
    ctx: IndexerContext = Depends(get_indexer_context),
) -> ApiResponse:
    data = await ingest_events(body.events, ctx)
    resp = success_response(data.model_dump(), request_id=_get_request_id(request))
    resp.message = f"Applied {data.processed} events"
    return resp
