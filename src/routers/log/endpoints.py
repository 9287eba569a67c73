# ── src/routers/log/endpoints.py ──────────────────────────────────────
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

from blob_logger import ErrorContext, LoggerService, LogStoreError, NamespaceNotFound

from .deps import get_logger_service

_logger = logging.getLogger(__name__)

_FAMILY_RE = re.compile(r"[A-Za-z0-9_-]{1,64}")

# ── Pydantic payloads ----------------------------------------------------
class ErrorPayload(BaseModel):
    label:    str           = Field(..., description="Where the error was caught")
    message:  str           = Field(..., description="Error message")
    location: Optional[str] = Field(None, description="file:line of the failure")
    trace:    Optional[str] = Field(None, description="Stack trace text")


class LogPayload(BaseModel):
    message:   str                    = Field(..., description="Free-text log line")
    base_name: Optional[str]          = Field(None, description="Log family (default LOG_BASE_NAME)")
    error:     Optional[ErrorPayload] = Field(None, description="Error block appended after the message")
    separator: bool                   = Field(False, description="Append a divider after the entry")

    @field_validator("base_name")
    @classmethod
    def _family_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _FAMILY_RE.fullmatch(v):
            raise ValueError("base_name may only contain letters, digits, '_' and '-'")
        return v

# ── Router ---------------------------------------------------------------
router = APIRouter()

# ── Helpers --------------------------------------------------------------
def _store_error(exc: LogStoreError) -> HTTPException:
    _logger.warning("Log store error: %s", exc)
    status = 503 if isinstance(exc, NamespaceNotFound) else 502
    return HTTPException(
        status_code=status,
        detail={"error": str(exc), "type": exc.__class__.__name__},
    )

def _use_family(svc: LoggerService, base_name: Optional[str]) -> LoggerService:
    if base_name:
        svc.set_base_name(base_name)
    return svc

# ── Endpoints ------------------------------------------------------------
@router.post("/api/log", summary="Append a log line and flush it to storage")
def append_log(payload: LogPayload, svc: LoggerService = Depends(get_logger_service)):
    _use_family(svc, payload.base_name).append(payload.message)
    if payload.error:
        svc.append_error(ErrorContext(**payload.error.model_dump()))
    if payload.separator:
        svc.append_separator()

    try:
        svc.flush()
    except LogStoreError as exc:
        raise _store_error(exc) from exc

    written = svc.last_record
    return {
        "status": "success",
        "log_id": written.id if written else None,
        "length": written.body_length if written else 0,
    }


@router.get("/api/log/current", summary="Newest log record, body included")
def current_log(
    base_name: Optional[str] = Query(None),
    svc: LoggerService = Depends(get_logger_service),
):
    try:
        record = _use_family(svc, base_name).current_log()
    except LogStoreError as exc:
        raise _store_error(exc) from exc
    if record is None:
        raise HTTPException(status_code=404, detail="No log records yet")
    return {**record.summary(), "body": record.body}


@router.get("/api/log/list", summary="Most recent log records (metadata)")
def list_logs(
    base_name: Optional[str] = Query(None),
    limit:     int           = Query(10, ge=1, le=10),
    svc: LoggerService = Depends(get_logger_service),
):
    try:
        records = _use_family(svc, base_name).log_list(limit)
    except LogStoreError as exc:
        raise _store_error(exc) from exc
    return [r.summary() for r in records]
