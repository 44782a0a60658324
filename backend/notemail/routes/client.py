"""
Notemail Backend — Client Document Route
========================================

What:  Serves the single-page client at `/`. Its script and stylesheet are
       served from `/static` by the StaticFiles mount in main.py.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["Client"])


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")
