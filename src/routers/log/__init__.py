# ── src/routers/log/__init__.py ───────────────────────────────────────
"""
Logging sub-router.

Exposes the blob-backed log over HTTP:
    POST /api/log            append one message (optionally an error block) and flush
    GET  /api/log/current    newest record of the family, body included
    GET  /api/log/list       up to 10 most recent records (metadata only)

Records are stored as text blobs in the container named by LOG_CONTAINER;
see `blob_logger` for the buffering / rotation rules.
"""
from .endpoints import router  # re-export for `include_router`
