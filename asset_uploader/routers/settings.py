from typing import Optional

from fastapi import APIRouter, Depends
from asset_uploader.dependencies import get_uploader
from asset_uploader.schemas.upload import ReloadSettingsRequest, ReloadSettingsResponse, SettingsUpdate
from asset_uploader.services.uploader import Uploader
import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/settings", tags=["settings"])


@router.post("/reload", response_model=ReloadSettingsResponse)
def reload_settings(
    request: Optional[ReloadSettingsRequest] = None,
    uploader: Uploader = Depends(get_uploader)
):
    """Re-read the storage settings from the host configuration."""
    update = SettingsUpdate(plugin=request.plugin) if request else None
    uploader.reload_settings(update)

    logger.info("Settings reload requested", plugin=request.plugin if request else None)
    return ReloadSettingsResponse()
