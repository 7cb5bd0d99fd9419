"""
Song rating persistence (raw SQL).

Voters are identified by network address (`user_ip`).
"""

from __future__ import annotations

from core.db import Database


async def count_by_type(db: Database, *, title: str, artist: str) -> dict[str, int]:
    rows = await db.fetch_all(
        """
        SELECT rating_type, count(*) AS count
        FROM song_ratings
        WHERE song_title = $1
          AND song_artist = $2
        GROUP BY rating_type
        """,
        title,
        artist,
    )
    return {str(row["rating_type"]): int(row["count"]) for row in rows}


async def get_vote(db: Database, *, title: str, artist: str, voter: str) -> str | None:
    row = await db.fetch_one(
        """
        SELECT rating_type
        FROM song_ratings
        WHERE song_title = $1
          AND song_artist = $2
          AND user_ip = $3
        LIMIT 1
        """,
        title,
        artist,
        voter,
    )
    if row is None:
        return None
    return str(row["rating_type"])


async def insert_vote(db: Database, *, title: str, artist: str, rating: str, voter: str) -> None:
    await db.execute(
        """
        INSERT INTO song_ratings (song_title, song_artist, rating_type, user_ip)
        VALUES ($1, $2, $3, $4)
        """,
        title,
        artist,
        rating,
        voter,
    )


async def update_vote(db: Database, *, title: str, artist: str, rating: str, voter: str) -> None:
    await db.execute(
        """
        UPDATE song_ratings
        SET rating_type = $1,
            created_at = now()
        WHERE song_title = $2
          AND song_artist = $3
          AND user_ip = $4
        """,
        rating,
        title,
        artist,
        voter,
    )
