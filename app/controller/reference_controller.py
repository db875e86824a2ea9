import logging
from litestar import Controller, get
from litestar.enums import MediaType
from litestar.exceptions import HTTPException
from litestar.params import Parameter
from litestar.response import Response
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

from app.service.reference_service import ReferenceService, ReferenceValidationError

logger = logging.getLogger(__name__)


class ReferenceController(Controller):
    """Controller for resolving repository references."""

    path = "/api"

    @get("/references")
    async def get_references(
        self,
        reference_service: ReferenceService,
        repo: str = "",
        git_ref: str = Parameter(query="gitRef", default=""),
    ) -> Response:
        """
        Resolve a release, tag or commit reference.

        Args:
            repo: Repository as owner/name
            git_ref: Release tag, git tag or commit SHA, optionally
                suffixed with --<metadata>

        Returns:
            The latest and current reference as JSON, forwarded from the
            backend that resolved it
        """
        try:
            resolved = await reference_service.resolve(repo, git_ref)
        except ReferenceValidationError as e:
            # Rely on application-level validation error handler
            raise e
        except Exception as e:
            logger.exception(f"Unexpected error in get_references: {str(e)}")
            raise HTTPException(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Internal server error: {str(e)}",
            )

        return Response(
            content=resolved.body,
            media_type=MediaType.JSON,
            status_code=resolved.status_code,
            headers={"X-Cache-Status": "HIT" if resolved.cache_hit else "MISS"},
        )
