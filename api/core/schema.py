"""
Database schema (DDL).

Applied at startup when DB_INIT_SCHEMA is enabled; safe to re-run.
"""

from __future__ import annotations

import logging

from .db import Database

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(255) NOT NULL,
    email       VARCHAR(255) NOT NULL UNIQUE,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS students (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(255) NOT NULL,
    email       VARCHAR(255) NOT NULL UNIQUE,
    grade       VARCHAR(50) NOT NULL,
    major       VARCHAR(255),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);

-- One vote per (song, voter) is kept by the ratings service, not by a constraint.
CREATE TABLE IF NOT EXISTS song_ratings (
    id          SERIAL PRIMARY KEY,
    song_title  VARCHAR(500) NOT NULL,
    song_artist VARCHAR(500) NOT NULL,
    rating_type VARCHAR(10) NOT NULL CHECK (rating_type IN ('up', 'down')),
    user_ip     VARCHAR(100) NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS song_ratings_song_voter_idx
    ON song_ratings (song_title, song_artist, user_ip);

CREATE TABLE IF NOT EXISTS audit_log (
    id          SERIAL PRIMARY KEY,
    action      VARCHAR(10) NOT NULL CHECK (action IN ('CREATE', 'UPDATE', 'DELETE')),
    entity_type VARCHAR(50) NOT NULL,
    entity_id   INTEGER NOT NULL,
    user_name   VARCHAR(255),
    user_email  VARCHAR(255),
    changes     JSONB,
    ip_address  VARCHAR(100),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS audit_log_created_at_idx
    ON audit_log (created_at DESC);
"""


async def init_schema(db: Database) -> None:
    await db.execute(SCHEMA_SQL)
    logger.info("db_schema_ready")
