import pathlib

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from ducktype.database import get_db


router = APIRouter(tags=["ui"])
_INDEX_HTML = pathlib.Path(__file__).resolve().parents[1] / "static" / "index.html"


# Single-page client for conversations, messages and aha moments
@router.get("/", response_class=HTMLResponse)
def index():
    return _INDEX_HTML.read_text(encoding="utf-8")


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
