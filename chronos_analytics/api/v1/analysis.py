"""GET /v1/analysis - complete and per-entity analysis endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder

from chronos_analytics.api.dependencies import get_request_id, get_store
from chronos_analytics.domain.exceptions import DataStoreError, UnknownEntityError
from chronos_analytics.domain.models import CompleteAnalysis
from chronos_analytics.domain.reporting import get_complete_analysis, run_analyzer
from chronos_analytics.domain.store import DocumentStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/analysis", response_model=CompleteAnalysis)
async def complete_analysis(request: Request, store: DocumentStore = Depends(get_store)):
    """
    Run every analyzer and return the merged report with its summary.

    Fails as a whole when any collection cannot be fetched.
    """
    request_id = get_request_id(request)
    try:
        return await get_complete_analysis(store)
    except DataStoreError as e:
        logger.error(f"Document store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Document store unavailable")
    except Exception as e:
        logger.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/analysis/{entity}")
async def entity_analysis(entity: str, request: Request, store: DocumentStore = Depends(get_store)):
    """Run a single analyzer (clients, sales, purchase-orders, ...)"""
    request_id = get_request_id(request)
    try:
        result = await run_analyzer(entity, store)
    except UnknownEntityError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataStoreError as e:
        logger.error(f"Document store error: {e}", extra={"request_id": request_id, "analyzer": entity})
        raise HTTPException(status_code=503, detail="Document store unavailable")
    except Exception as e:
        logger.error(f"Unexpected error: {e}", extra={"request_id": request_id, "analyzer": entity})
        raise HTTPException(status_code=500, detail="Internal server error")
    return jsonable_encoder(result)
