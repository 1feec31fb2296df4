"""
JSON API routes.
Handles create, raw fetch and delete of pastes.
"""
from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from pastebox import identifier
from pastebox.database import PasteDatabase
from pastebox.models import EntryCreate, RedirectResponse
from pastebox.routes.shared import get_db, insert_entry

router = APIRouter(prefix="/api")


@router.post("/entries", response_model=RedirectResponse)
async def create_entry(
    paste: EntryCreate,
    db: PasteDatabase = Depends(get_db),
) -> RedirectResponse:
    """
    Create a new paste.

    Returns:
        Path of the new paste
    """
    path = await insert_entry(db, paste.to_entry())
    return RedirectResponse(path=path)


@router.get("/entries/{paste_id}", response_class=PlainTextResponse)
def raw_entry(paste_id: str, db: PasteDatabase = Depends(get_db)) -> str:
    """Fetch the raw text of a paste."""
    return db.get(identifier.parse(paste_id)).text


@router.delete("/entries/{paste_id}")
def delete_entry(paste_id: str, db: PasteDatabase = Depends(get_db)) -> Response:
    """
    Delete a paste within its deletion window.

    Raises:
        DeletionTimeExpired: If the paste is too old to be deleted (403)
        NotFound: If the paste does not exist (404)
    """
    paste = identifier.parse(paste_id)
    db.get(paste).ensure_deletable()
    db.delete(paste)
    return Response(status_code=200)
