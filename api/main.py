from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from audit import router as audit_router
from core import config, errors
from core.db import Database
from core.log import configure_logging
from core.schema import init_schema
from health import router as health_router
from ratings import router as ratings_router
from students import router as students_router
from users import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, owned by the Database handle on app.state.
    db: Database = app.state.db
    await db.connect()
    try:
        if config.db_init_schema():
            await init_schema(db)
        yield
    finally:
        await db.close()


def create_app(database: Database | None = None) -> FastAPI:
    configure_logging()

    app = FastAPI(title="radiocalco api", lifespan=lifespan)
    app.state.db = database if database is not None else Database.from_env()

    # Allow the local frontend dev servers to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    errors.register_exception_handlers(app)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(users_router.router, tags=["users"])
    app.include_router(students_router.router, tags=["students"])
    app.include_router(ratings_router.router, tags=["ratings"])
    app.include_router(audit_router.router, tags=["audit"])

    @app.get("/")
    def root() -> dict:
        return {"message": "radiocalco api"}

    return app


app = create_app()
