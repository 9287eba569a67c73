# ── src/routers/log/html_console_endpoint.py ─────────────────────────
"""
Browser-friendly console for viewing log records stored in blob storage.

•  /api/log/console/                → list the most recent log records
•  /api/log/console/<record_id>     → table view of one record (newest line first)
"""
from typing import List, Optional, Tuple
from urllib.parse import quote, urlencode
import html

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from blob_logger import LoggerService, LogStore, LogStoreError

from .deps import get_logger_service, get_store

# ── Router -------------------------------------------------------------
router = APIRouter()

# ── Helpers ------------------------------------------------------------
def _html_page(title: str, body: str) -> str:
    """Simple, dependency-free HTML template."""
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{html.escape(title)}</title>
  <style>
      body {{ font-family: Arial, sans-serif; margin: 2rem; }}
      table {{ border-collapse: collapse; width: 100%; }}
      th, td {{ border: 1px solid #ccc; padding: .45rem .6rem; text-align: left; vertical-align: top; }}
      th {{ background: #f2f2f2; }}
      td.msg {{ white-space: pre-wrap; font-family: monospace; }}
      a.button {{
          display: inline-block; padding: .3rem .7rem; margin: 0 .2rem;
          background: #0078d4; color: #fff; border-radius: 4px; text-decoration: none;
      }}
      a.button:hover {{ background: #005a9e; }}
  </style>
</head>
<body>
{body}
</body>
</html>
"""

def _split_lines(body: str) -> List[Tuple[str, str]]:
    """Body → [(timestamp, text)]; divider / blank lines keep an empty timestamp."""
    rows = []
    for line in body.splitlines():
        if not line.strip():
            continue
        ts, sep, text = line.partition(" | ")
        rows.append((ts, text) if sep else ("", line))
    return rows

def _family_query(base_name: Optional[str]) -> str:
    """`?base_name=…` so console links stay on the same log family."""
    if not base_name:
        return ""
    return html.escape("?" + urlencode({"base_name": base_name}))

def _store_failure(exc: LogStoreError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Log store query failed: {exc}")

# ── Routes -------------------------------------------------------------
@router.get("/api/log/console/", include_in_schema=False,
            response_class=HTMLResponse)
def list_log_records(
    base_name: Optional[str] = Query(None),
    svc: LoggerService = Depends(get_logger_service),
):
    """Render a table listing the most recent log records of one family."""
    if base_name:
        svc.set_base_name(base_name)
    try:
        records = svc.log_list()
    except LogStoreError as exc:
        raise _store_failure(exc) from exc

    if not records:
        body = f"<h2>No logs found for <code>{html.escape(svc.base_name)}</code></h2>"
        return _html_page("Log Console – no logs", body)

    family = _family_query(svc.base_name)
    rows = []
    for r in records:
        rec_id   = html.escape(r.id)
        display  = html.escape(r.display_name)
        created  = html.escape(r.created_at.isoformat(sep=" ", timespec="seconds")) if r.created_at else ""
        size     = r.size if r.size is not None else r.body_length

        rows.append(f"""
        <tr>
            <td>{rec_id}</td>
            <td>{display}</td>
            <td>{created}</td>
            <td>{size}</td>
            <td>
                <a class="button" href="/api/log/console/{html.escape(quote(r.id))}{family}">View</a>
            </td>
        </tr>""")

    body = f"""
    <h2>Log Records – <code>{html.escape(svc.base_name)}</code></h2>
    <table>
        <thead>
            <tr>
                <th>Record ID</th>
                <th>Name</th>
                <th>Created</th>
                <th>Size (chars)</th>
                <th></th>
            </tr>
        </thead>
        <tbody>
            {''.join(rows)}
        </tbody>
    </table>
    """
    return _html_page("Log Console", body)

@router.get("/api/log/console/{record_id}", include_in_schema=False,
            response_class=HTMLResponse)
def view_log_record(
    record_id: str,
    base_name: Optional[str] = Query(None),
    store: LogStore = Depends(get_store),
):
    """Display one record, one line per table row."""
    try:
        record = store.get(record_id)
    except LogStoreError as exc:
        raise _store_failure(exc) from exc
    if record is None:
        raise HTTPException(status_code=404, detail="Log not found")

    lines = _split_lines(record.body)
    if not lines:
        body = f"<p>No entries in log <code>{html.escape(record_id)}</code>.</p>"
        return _html_page(f"Log {record_id}", body)

    rows = []
    for ts, text in lines:
        rows.append(f"""
        <tr>
            <td>{html.escape(ts)}</td>
            <td class="msg">{html.escape(text)}</td>
        </tr>""")

    body = f"""
    <a class="button" href="/api/log/console/{_family_query(base_name)}">← Back</a>
    <h2>{html.escape(record.display_name)} <code>{html.escape(record_id)}</code></h2>
    <table>
        <thead>
            <tr>
                <th>Timestamp</th>
                <th>Message</th>
            </tr>
        </thead>
        <tbody>
            {''.join(rows)}
        </tbody>
    </table>
    """
    return _html_page(f"Log {record_id}", body)
