"""Main FastAPI application and server startup."""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from memories_api.auth.identity import GitHubIdentityResolver, IdentityResolver
from memories_api.auth.tokens import TokenIssuer
from memories_api.config.settings import Settings
from memories_api.memory.errors import MemoriesError
from memories_api.persist.sqlite_store import MemoryStore
from memories_api.telemetry import configure_logging, get_logger
from .auth import router as auth_router
from .memories import router as memories_router
from .schemas import HealthResponse


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MemoryStore] = None,
    identity_resolver: Optional[IdentityResolver] = None,
    token_issuer: Optional[TokenIssuer] = None,
) -> FastAPI:
    """
    Build the application and wire its collaborators.

    Anything not passed in is built from ``settings``. A store built here is
    opened on startup and closed on shutdown; a store passed in belongs to
    the caller.
    """
    settings = settings or Settings.from_env()
    owns_store = store is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.store is None:
            app.state.store = MemoryStore(settings.database.path)
        yield
        if owns_store and app.state.store is not None:
            app.state.store.close()
            app.state.store = None

    app = FastAPI(
        title="Memories API",
        description="Journal of public and private memories with GitHub sign-in",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.identity_resolver = identity_resolver or GitHubIdentityResolver(settings.github)
    app.state.token_issuer = token_issuer or TokenIssuer(settings.auth)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(memories_router)

    @app.exception_handler(MemoriesError)
    async def memories_error_handler(request: Request, exc: MemoriesError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "error": exc.kind},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        issues = [
            {"loc": list(err.get("loc", [])), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "error": "validation_error", "issues": issues},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            components={
                "store": app.state.store is not None,
                "identity_resolver": app.state.identity_resolver is not None,
                "token_issuer": app.state.token_issuer is not None,
            },
        )

    return app


def run():
    """Run the server."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("server_starting", host=settings.server.host, port=settings.server.port)
    uvicorn.run(create_app(settings), host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    run()
