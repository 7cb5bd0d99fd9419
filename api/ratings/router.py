"""
Song rating API endpoints.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

from fastapi import APIRouter, Depends, Request, Response

from core import errors
from core.body import body_of
from core.client import client_address
from core.db import Database, get_database

from . import schemas, service

router = APIRouter()

_PREFIX = "/api/ratings/"

_MESSAGES = {
    service.SUBMITTED: (201, "Rating submitted successfully"),
    service.UPDATED: (200, "Rating updated successfully"),
}


def _song_from_path(request: Request) -> tuple[str, str]:
    """
    Split the undecoded path into title and artist, then decode each segment.

    Splitting before decoding keeps an encoded slash ("AC%2FDC") inside its
    segment.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = quote(request.scope["path"], safe="/")
    _, _, rest = path.partition(_PREFIX)
    segments = rest.split("/")
    if len(segments) != 2 or not all(segments):
        raise errors.NotFound("Not found")
    title, artist = (unquote(segment) for segment in segments)
    return title, artist


@router.get("/api/ratings/{song_path:path}")
async def get_ratings(request: Request, db: Database = Depends(get_database)) -> dict:
    title, artist = _song_from_path(request)
    result = await service.get_ratings(
        db,
        title=title,
        artist=artist,
        voter=client_address(request),
    )
    return {"status": "success", **result}


@router.post("/api/ratings")
async def submit_rating(
    request: Request,
    response: Response,
    payload: schemas.RatingRequest = Depends(body_of(schemas.RatingRequest)),
    db: Database = Depends(get_database),
) -> dict:
    outcome = await service.submit_rating(db, payload, voter=client_address(request))
    status_code, message = _MESSAGES[outcome]
    response.status_code = status_code
    return {"status": "success", "message": message}
