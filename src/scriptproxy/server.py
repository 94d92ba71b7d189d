"""
scriptproxy Web API service
Redirects to the GitHub repository and serves allow-listed installer scripts
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from . import __version__
from .api.client import GithubFetcher, UpstreamError
from .config import Settings, get_config
from .routing import resolve_script, split_path

logger = logging.getLogger(__name__)

STATUS_BODY = {"statusCode": 200, "message": "API is running"}


class ScriptRouter:
    """
    Request dispatcher

    Every negative outcome (empty path, disallowed name, upstream miss or
    failure) ends in the same redirect to the repository.
    """

    def __init__(self, settings: Settings, fetcher: GithubFetcher):
        self.settings = settings
        self.fetcher = fetcher

    def redirect_to_repository(self) -> RedirectResponse:
        return RedirectResponse(self.settings.repository_url, status_code=302)

    def handle_root(self) -> Response:
        return self.redirect_to_repository()

    def handle_status(self) -> Response:
        return JSONResponse(STATUS_BODY, status_code=200)

    async def handle_file(self, segments: List[str]) -> Response:
        target = resolve_script(segments)
        if target is None:
            return self.redirect_to_repository()

        try:
            buffer = await self.fetcher.fetch_file(target.upstream_path)
        except UpstreamError as e:
            logger.warning(f"{e}, redirecting")
            return self.redirect_to_repository()

        if buffer is None:
            return self.redirect_to_repository()

        logger.info(f"Serving {target.upstream_path} ({len(buffer)} bytes)")
        return Response(
            content=buffer,
            status_code=200,
            media_type=target.content_type,
            headers={"Content-Disposition": target.content_disposition},
        )


def get_script_router(request: Request) -> ScriptRouter:
    return request.app.state.script_router


router = APIRouter()


@router.get("/")
async def root(script_router: ScriptRouter = Depends(get_script_router)):
    """Redirect to the repository"""
    return script_router.handle_root()


@router.get("/status")
async def status(script_router: ScriptRouter = Depends(get_script_router)):
    """Liveness check, never contacts GitHub"""
    return script_router.handle_status()


@router.get("/{path:path}")
async def get_file(request: Request, script_router: ScriptRouter = Depends(get_script_router)):
    """Serve an allow-listed script or redirect"""
    # decoded ASGI path; the route parameter loses a trailing newline
    return await script_router.handle_file(split_path(request.scope["path"][1:]))


async def redirect_not_found(request: Request, exc):
    """Unmatched paths redirect like any other miss"""
    return get_script_router(request).redirect_to_repository()


def create_app(settings: Optional[Settings] = None, fetcher: Optional[GithubFetcher] = None) -> FastAPI:
    """
    Build the ASGI app

    Args:
        settings: defaults to get_config()
        fetcher: defaults to a GithubFetcher built from settings
    """
    settings = settings or get_config()
    fetcher = fetcher or GithubFetcher.from_settings(settings)

    app = FastAPI(
        title="scriptproxy",
        description="Installer script proxy for a GitHub repository",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.script_router = ScriptRouter(settings, fetcher)
    app.include_router(router)
    app.add_exception_handler(404, redirect_not_found)
    return app
