"""Static pages, served from the production build when one exists."""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response

from knowcards.web.dependencies import get_site_dir

router = APIRouter()

ROUTE_ALIASES = {
    "/": "/index.html",
    "/admin": "/admin.html",
    "/roadmap": "/roadmap.html",
    **{f"/lecture{n}": f"/lecture{n}.html" for n in range(7)},
}

MIME_TYPES = {
    ".css": "text/css; charset=utf-8",
    ".html": "text/html; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".ts": "text/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".txt": "text/plain; charset=utf-8",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def content_type_for(path: Path) -> str:
    """Look up the Content-Type for a file by extension."""
    return MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")


def resolve_static(site_dir: Path, url_path: str) -> Path | None:
    """Map a URL path to a file under ``dist/`` or the site root.

    Returns None when the path escapes both roots.
    """
    url_path = ROUTE_ALIASES.get(url_path, url_path)
    relative = url_path.lstrip("/")

    site_root = site_dir.resolve()
    dist_root = site_root / "dist"

    dist_path = (dist_root / relative).resolve()
    if dist_path.is_relative_to(dist_root) and dist_path.is_file():
        return dist_path

    root_path = (site_root / relative).resolve()
    if root_path.is_relative_to(site_root):
        return root_path
    return None


@router.get("/api/{rest:path}", include_in_schema=False)
async def unknown_api(rest: str) -> Response:
    """Unknown API paths get a JSON 404 rather than a static lookup."""
    return JSONResponse(status_code=404, content={"error": f"not found: /api/{rest}"})


@router.get("/{url_path:path}", include_in_schema=False)
async def serve_static(url_path: str, site_dir: Path = Depends(get_site_dir)) -> Response:
    """Serve a page or asset."""
    path = resolve_static(site_dir, "/" + url_path)
    if path is None:
        return JSONResponse(status_code=403, content={"error": "forbidden"})
    if not path.is_file():
        return PlainTextResponse("Not Found", status_code=404)
    return FileResponse(path, media_type=content_type_for(path))
