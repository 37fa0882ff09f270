import json
import logging
from typing import Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from motiva_backend.api.utils import CORS_HEADERS, get_document_store, reject_json_constant
from motiva_backend.interface.collections import ID_FIELD, PARQ_SUBMISSIONS
from motiva_backend.interface.parq import ParqSubmission
from motiva_backend.settings import settings
from motiva_backend.store.base import DocumentStore, StoreError, new_document

logger = logging.getLogger(__name__)

parq_router = APIRouter()


class ParqIntakeError(Exception):

    def __init__(self, status_code: int, code: str, error: str):
        super().__init__(error)
        self.status_code = status_code
        self.code = code
        self.error = error


def submit_parq_db(store: DocumentStore, body: Union[bytes, str, None]) -> str:
    """Validate and store a PAR-Q submission, returning the new record id"""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if not body:
        raise ParqIntakeError(400, "MISSING_BODY", "Request body is required")

    try:
        raw = json.loads(body, parse_constant=reject_json_constant)
    except ValueError:
        raise ParqIntakeError(400, "INVALID_JSON", "Invalid JSON in request body")

    if not isinstance(raw, dict):
        raise ParqIntakeError(400, "INVALID_JSON", "Invalid JSON in request body")

    try:
        submission = ParqSubmission.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Rejected PAR-Q payload: {e.error_count()} invalid fields")
        raise ParqIntakeError(400, "VALIDATION_ERROR", "Invalid PAR-Q payload")

    error = submission.validation_error()
    if error is not None:
        raise ParqIntakeError(400, "VALIDATION_ERROR", error)

    record = new_document(submission.to_record(settings.DEFAULT_TRAINER_ID))

    try:
        created = store.insert(PARQ_SUBMISSIONS, record)
    except StoreError as e:
        logger.error(f"PAR-Q insert failed: {e}")
        raise ParqIntakeError(500, "DATABASE_ERROR", "Unable to submit PAR-Q. Please try again.")

    logger.info(
        f"PAR-Q {created[ID_FIELD]} stored for {submission.email}"
        f" (flagsYes={record['flagsYes']}, trainer={record['assignedTrainerId'] or '-'})"
    )
    return created[ID_FIELD]


@parq_router.options("/parq-submit")
async def options_parq_submit():
    return JSONResponse({"ok": True}, headers=CORS_HEADERS)

@parq_router.post("/parq-submit")
async def post_parq_submit(request: Request, store: DocumentStore = Depends(get_document_store)):
    body = await request.body()

    try:
        item_id = await run_in_threadpool(submit_parq_db, store, body)
    except ParqIntakeError as e:
        return JSONResponse(
            {"ok": False, "code": e.code, "error": e.error},
            status_code=e.status_code,
            headers=CORS_HEADERS,
        )

    return JSONResponse({"ok": True, "id": item_id}, headers=CORS_HEADERS)
