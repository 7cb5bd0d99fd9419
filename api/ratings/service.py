"""
Song rating business logic.

Each voter holds at most one vote per song:
- no vote yet        -> insert, outcome SUBMITTED
- different vote     -> overwrite and refresh timestamp, outcome UPDATED
- same vote again    -> DuplicateVote, nothing written

The lookup and the write are separate statements, so two concurrent first
votes from the same address can both insert.
"""

from __future__ import annotations

from core import errors, validation
from core.db import Database, DatabaseError

from . import repository, schemas

UP = "up"
DOWN = "down"
RATING_TYPES = (UP, DOWN)

SUBMITTED = "submitted"
UPDATED = "updated"


async def get_ratings(db: Database, *, title: str, artist: str, voter: str) -> dict:
    try:
        counts = await repository.count_by_type(db, title=title, artist=artist)
        user_rating = await repository.get_vote(db, title=title, artist=artist, voter=voter)
    except DatabaseError as exc:
        raise errors.StoreError("Failed to fetch ratings", detail=str(exc)) from exc

    return {
        "ratings": {rating_type: counts.get(rating_type, 0) for rating_type in RATING_TYPES},
        "userRating": user_rating,
    }


async def submit_rating(db: Database, payload: schemas.RatingRequest, *, voter: str) -> str:
    validation.require_fields(
        payload.model_dump(),
        ["title", "artist", "rating"],
        "Title, artist, and rating are required",
    )
    if payload.rating not in RATING_TYPES:
        raise errors.InvalidRating('Rating must be either "up" or "down"')

    title, artist, rating = payload.title, payload.artist, payload.rating
    try:
        existing = await repository.get_vote(db, title=title, artist=artist, voter=voter)
        if existing is None:
            await repository.insert_vote(db, title=title, artist=artist, rating=rating, voter=voter)
            return SUBMITTED
        if existing != rating:
            await repository.update_vote(db, title=title, artist=artist, rating=rating, voter=voter)
            return UPDATED
    except DatabaseError as exc:
        raise errors.StoreError("Failed to submit rating", detail=str(exc)) from exc

    raise errors.DuplicateVote("You have already rated this song")
