"""Serve the single-page app's build output for every path the API does not claim."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from ..core.config import settings

router = APIRouter(include_in_schema=False)


def _resolve_asset(build_dir: Path, path: str) -> Path | None:
    root = build_dir.resolve()
    candidate = (root / path).resolve()
    # Keep lookups inside the build folder.
    if candidate != root and root not in candidate.parents:
        return None
    if candidate.is_file():
        return candidate
    return None


@router.get("/{full_path:path}")
def spa_fallback(full_path: str):
    if full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")
    build_dir = settings.frontend_build_dir
    asset = _resolve_asset(build_dir, full_path) if full_path else None
    if asset is not None:
        return FileResponse(asset)
    index = build_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(index)
