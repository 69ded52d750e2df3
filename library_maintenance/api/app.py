from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from library_maintenance import config
from library_maintenance.api.errors import register_exception_handlers
from library_maintenance.api.routes import artist_genres, genres, youtube
from library_maintenance.db import connection as db_connection


def create_app(pool: ConnectionPool | None = None) -> FastAPI:
    """Build the application.

    Without ``pool`` the app opens its own pool at startup and closes it at
    shutdown. A pool passed in is used as is and left open.
    """
    app = FastAPI(
        title=config.SERVICE_NAME,
        description="API for maintaining a personal music library",
        version=config.SERVICE_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(youtube.router, prefix="/youtube", tags=["youtube"])
    app.include_router(artist_genres.router, prefix="/artistgenres", tags=["artist-genres"])
    app.include_router(genres.router, prefix="/genres", tags=["genres"])

    app.state.pool = pool
    app.state.owns_pool = pool is None

    @app.on_event("startup")
    def open_connection_pool() -> None:
        if app.state.pool is None:
            app.state.pool = db_connection.create_pool()

    @app.on_event("shutdown")
    def shutdown_connection_pool() -> None:
        """Close the database connection pool on shutdown."""
        if app.state.owns_pool and app.state.pool is not None:
            db_connection.close_pool(app.state.pool)
            app.state.pool = None

    @app.get("/")
    async def root():
        return {"message": config.SERVICE_NAME, "version": config.SERVICE_VERSION}

    @app.get("/health")
    def health():
        """Health check with connection pool stats."""
        try:
            db_connection.ping(app.state.pool)
            return {
                "status": "healthy",
                "pool": db_connection.get_pool_stats(app.state.pool),
            }
        except Exception as e:
            return {
                "status": "degraded",
                "error": str(e),
            }

    return app


app = create_app()
