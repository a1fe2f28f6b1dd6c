"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rideshare.api import posts, reports, users
from rideshare.api.errors import register_exception_handlers
from rideshare.config import get_settings
from rideshare.services.identity import GoogleIdentityVerifier, IdentityVerifier
from rideshare.services.notifications import CeleryPostNotifier, PostNotifier
from rideshare.services.sessions import SessionStore, SignedCookieSessionStore

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    # Startup: Initialize application resources here
    yield
    # Shutdown: Clean up resources here


def create_app(
    session_store: SessionStore | None = None,
    identity_verifier: IdentityVerifier | None = None,
    notifier: PostNotifier | None = None,
) -> FastAPI:
    """Build the API with the given collaborators, defaulting to the production ones."""
    app = FastAPI(
        title="UCShareCar API",
        description="Ride sharing for the UCSC community",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.session_store = session_store or SignedCookieSessionStore.from_settings(settings)
    app.state.identity_verifier = identity_verifier or GoogleIdentityVerifier.from_settings(
        settings
    )
    app.state.notifier = notifier or CeleryPostNotifier()

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:3000", "http://localhost:8080"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(users.router)
    app.include_router(posts.router)
    app.include_router(reports.router)

    @app.get("/")
    async def index():
        """Check that the server is running."""
        return {"result": 1}

    return app


app = create_app()
