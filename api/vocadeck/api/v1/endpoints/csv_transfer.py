"""
CSV import/export endpoint.
"""
import logging
from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from vocadeck.core.context import RequestContext, get_request_context
from vocadeck.core.database import get_store
from vocadeck.core.exceptions import ValidationError
from vocadeck.core.record_store import RecordStore
from vocadeck.schemas.card_set import CsvImportRequest, ImportResponse, SkippedRow
from vocadeck.services import card_service
from vocadeck.services.csv_service import generate_template

logger = logging.getLogger(__name__)

router = APIRouter(tags=["csv"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


@router.post("/card-sets/{card_set_id}/import", response_model=ImportResponse)
async def import_csv(
    card_set_id: int,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """
    Import cards from CSV into a card set.

    The body is either raw CSV text or JSON {"csv": "..."}. Malformed rows
    are skipped and reported. Cards that fail to insert are counted in
    failed; the rest of the import still goes through.
    """
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError("CSV must be UTF-8 encoded") from e
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            text = CsvImportRequest.model_validate_json(body).csv
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid import body: {e}") from e

    result = await run_in_threadpool(card_service.import_csv, store, ctx, card_set_id, text)
    return ImportResponse(
        imported=result.imported,
        failed=result.failed,
        skipped_rows=[
            SkippedRow(line_number=row.line_number, reason=row.reason)
            for row in result.skipped_rows
        ],
        errors=result.errors,
    )


@router.get("/card-sets/{card_set_id}/export")
def export_csv(
    card_set_id: int,
    ctx: RequestContext = Depends(get_request_context),
    store: RecordStore = Depends(get_store)
):
    """Download the cards of a set as CSV in deck order."""
    content = card_service.export_cards_csv(store, ctx, card_set_id)
    logger.info(f"Exported card set {card_set_id} as CSV ({len(content)} chars)")
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": "attachment; filename=flashcards.csv"
        }
    )


@router.get("/csv/template")
def download_template():
    """Download a sample CSV with the header row and a few cards."""
    return Response(
        content=generate_template(),
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": "attachment; filename=flashcard_template.csv"
        }
    )
