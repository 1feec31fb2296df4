"""
Dependencies and helpers shared by the API and web routes.
"""
import logging

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from pastebox import identifier
from pastebox.cache import RenderCache
from pastebox.database import PasteDatabase
from pastebox.errors import IdentifierCollision
from pastebox.models import Entry

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 5


def get_db(request: Request) -> PasteDatabase:
    """Storage layer built by create_app()."""
    return request.app.state.db


def get_cache(request: Request) -> RenderCache:
    """Rendering cache built by create_app()."""
    return request.app.state.cache


async def insert_entry(db: PasteDatabase, entry: Entry) -> str:
    """
    Store an entry under a fresh identifier.

    Retries with a newly generated identifier on collision.

    Returns:
        Path of the new paste

    Raises:
        IdentifierCollision: If every attempt collided
    """
    for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
        paste_id = await identifier.generate_async()
        try:
            await run_in_threadpool(db.insert, paste_id, entry)
        except IdentifierCollision:
            logger.warning(f"Collision on attempt {attempt}/{MAX_INSERT_ATTEMPTS}, regenerating")
            continue
        return identifier.to_path(paste_id, entry)

    raise IdentifierCollision(f"No free identifier after {MAX_INSERT_ATTEMPTS} attempts")
