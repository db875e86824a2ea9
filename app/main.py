"""Main Litestar application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from litestar import Litestar, Request, Response, get
from litestar.datastructures import State
from litestar.di import Provide
from litestar.enums import MediaType
from litestar.openapi import OpenAPIConfig
from litestar.response import Redirect
from litestar.status_codes import HTTP_400_BAD_REQUEST

from app.config.settings import Settings, get_settings
from app.controller.reference_controller import ReferenceController
from app.repository.github_repository import GitHubRepository
from app.repository.memory_repository import MemoryCacheRepository
from app.service.backends import CommitBackend, ReleaseBackend, TagBackend
from app.service.reference_service import ReferenceService, ReferenceValidationError

logger = logging.getLogger("refapi.main")


async def get_reference_service(state: State) -> ReferenceService:
    """Dependency: Get reference service instance from app state."""
    return state.reference_service


def build_reference_service(
    settings: Settings,
    github_repo: GitHubRepository,
    cache_repo: MemoryCacheRepository,
) -> ReferenceService:
    """Wire the backend chain and cache into a ReferenceService."""
    return ReferenceService(
        settings.cache_config,
        cache_repo,
        release_backend=ReleaseBackend(github_repo),
        commit_backend=CommitBackend(github_repo),
        tag_backend=TagBackend(github_repo) if settings.tags_enabled else None,
    )


def validation_error_handler(
    request: Request, exc: ReferenceValidationError
) -> Response:
    """Handle rejected reference queries with a plain-text 400."""
    logger.info(f"Rejected {request.url.path}?{request.url.query}: {exc}")
    return Response(
        content=f"{exc}\n",
        media_type=MediaType.TEXT,
        status_code=HTTP_400_BAD_REQUEST,
    )


@get("/", include_in_schema=False)
async def root_handler() -> Redirect:
    """Redirect root to API documentation."""
    return Redirect(path="/docs")


@asynccontextmanager
async def lifespan(app: Litestar):
    """Application lifespan context manager for initializing resources."""
    settings = get_settings()

    logger.info(
        f"Using in-memory cache (size: {settings.cache_size}, "
        f"success: {settings.cache_success_duration}h, "
        f"error: {settings.cache_error_duration}h)"
    )
    cache_repo = MemoryCacheRepository(max_entries=settings.cache_size)
    github_repo = GitHubRepository(settings)

    # Store in app state
    app.state.github_repo = github_repo
    app.state.reference_service = build_reference_service(
        settings, github_repo, cache_repo
    )

    yield

    # Cleanup
    if hasattr(app.state, "github_repo"):
        await app.state.github_repo.close()


def create_app() -> Litestar:
    """Create and configure Litestar application."""
    settings = get_settings()
    return Litestar(
        debug=settings.dev,
        route_handlers=[root_handler, ReferenceController],
        dependencies={
            "reference_service": Provide(get_reference_service),
        },
        exception_handlers={
            ReferenceValidationError: validation_error_handler,
        },
        openapi_config=OpenAPIConfig(
            title="Reference API",
            version="0.1.0",
            path="/docs",
        ),
        lifespan=[lifespan],
    )


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info(f"Server running on http://localhost:{settings.server_port}")

    uvicorn.run(
        "app.main:app",
        reload=settings.dev,
        host=settings.server_host,
        port=settings.server_port,
        workers=settings.workers,
        log_level="info",
    )


if __name__ == "__main__":
    run()
