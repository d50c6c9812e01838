from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import FileResponse, HTMLResponse

from intranet.config import Settings
from intranet.dependencies import get_app_settings, get_optional_user, require_admin, require_login
from intranet.logger import logger
from intranet.models import User
from intranet.pages import admin_page, home_page, search_results_page
from intranet.resources import (
    ArtifactMissing,
    ArtifactUnreadable,
    flag_path,
    open_artifact,
    search_employees,
)

router = APIRouter(tags=["intranet"])


@router.get("/", response_class=HTMLResponse)
def home(user: Optional[User] = Depends(get_optional_user)):
    return home_page(user.username if user else None)


@router.get("/flag")
def download_flag(
    user: User = Depends(require_admin),
    settings: Settings = Depends(get_app_settings),
):
    """
    Protected artifact, admins only.

    - 404: artifact not present in the protected directory
    - 500: artifact present but unreadable (logged, generic message)
    """
    path = flag_path(settings)
    try:
        stat_result = open_artifact(path)
    except ArtifactMissing:
        logger.warning(f"Flag artifact missing at {path}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Flag introuvable",
        )
    except ArtifactUnreadable:
        logger.exception("Flag download error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lecture flag",
        )

    logger.info(f"Flag served to {user.username!r}")
    return FileResponse(
        path=str(path),
        filename=settings.flag_filename,
        media_type="application/octet-stream",
        stat_result=stat_result,
    )


@router.post("/search", response_class=HTMLResponse)
def search(
    q: str = Form(""),
    user: User = Depends(require_login),
    settings: Settings = Depends(get_app_settings),
):
    hits = search_employees(Path(settings.employees_path), q)
    return search_results_page(q, hits)


@router.get("/admin", response_class=HTMLResponse)
def admin_console(user: User = Depends(require_admin)):
    return admin_page(user.username)
