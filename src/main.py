# ── src/main.py ───────────────────────────────────────────────────────────────
import logging
import os
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [blob-logger] %(levelname)s %(name)s %(message)s",
    stream=sys.stderr,
)

app = FastAPI(title="blob-logger")

# ── CORS
# Accept a comma/space-separated FRONTEND_ORIGIN list; wildcard without
# credentials when none is configured.
def _parse_origins(env_value: str) -> list[str]:
    if not env_value:
        return []
    raw = [p.strip() for chunk in env_value.split(",") for p in chunk.split()]
    origins = []
    for o in raw:
        o = o.rstrip("/")
        if o and o not in origins:
            origins.append(o)
    return origins

_frontend_origins = _parse_origins(os.getenv("FRONTEND_ORIGIN", ""))

app.add_middleware(
    CORSMiddleware,
    allow_origins=_frontend_origins or ["*"],
    allow_credentials=bool(_frontend_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── routers ------------------------------------------------------------------
from routers.healthz.endpoints         import router as health_router
from routers.log.endpoints             import router as log_router
from routers.log.html_console_endpoint import router as log_console_router

app.include_router(health_router)
app.include_router(log_router)
app.include_router(log_console_router)

# ── root ---------------------------------------------------------------------
@app.get("/", include_in_schema=False)
def root():
    return {
        "status": "ok",
        "info": (
            "/healthz, /api/log (POST), /api/log/current, /api/log/list, "
            "/api/log/console/"
        ),
    }
