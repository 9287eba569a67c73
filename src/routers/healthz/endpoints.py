from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from blob_logger import LoggerConfig, LogStore

from routers.log.deps import get_config, get_store

router = APIRouter()

@router.get("/healthz", include_in_schema=False)
def health_check(
    config: LoggerConfig = Depends(get_config),
    store: LogStore = Depends(get_store),
):
    return JSONResponse({
        "status":  "healthy",
        "store":   store.__class__.__name__,
        "enabled": store.enabled,
        "family":  config.base_name,
    })
