import os
import shutil
import tempfile

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from asset_uploader.dependencies import get_uploader
from asset_uploader.errors import UploadError, map_exception_to_http
from asset_uploader.schemas.upload import ImageUrlUploadRequest, LocalFile, RemoteURL, UploadResult
from asset_uploader.services.uploader import Uploader
import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/uploads", tags=["upload"])


def _spool(upload: UploadFile) -> LocalFile:
    """Copy a multipart upload to a temp file the pipeline can read."""
    suffix = os.path.splitext(upload.filename or "")[1]
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        shutil.copyfileobj(upload.file, tmp)
        size = tmp.tell()
    return LocalFile(
        size=size,
        path=tmp.name,
        name=upload.filename or os.path.basename(tmp.name),
        original_name=upload.filename
    )


def _run(action, filename: str) -> UploadResult:
    try:
        return action()
    except UploadError as e:
        logger.warning("Upload rejected", error=e.message, filename=filename)
        raise map_exception_to_http(e)
    except Exception as e:
        logger.error("Upload failed", error=str(e), filename=filename)
        raise HTTPException(status_code=500, detail=f"Failed to upload file: {str(e)}")


@router.post("/file", response_model=UploadResult)
def upload_file(
    file: UploadFile = File(...),
    folder: str = Form(""),
    uploader: Uploader = Depends(get_uploader)
):
    """
    Upload a file to the configured bucket.

    Args:
        file: Multipart file
        folder: Optional folder below the configured upload path

    Returns:
        Display name and public URL of the stored object
    """
    local = _spool(file)
    try:
        result = _run(lambda: uploader.upload_file(local, folder), local.name)
    finally:
        os.unlink(local.path)

    logger.info("Uploaded file", filename=local.name, url=result.url)
    return result


@router.post("/image", response_model=UploadResult)
def upload_image(
    file: UploadFile = File(...),
    folder: str = Form(""),
    uploader: Uploader = Depends(get_uploader)
):
    """Upload an image file as is."""
    local = _spool(file)
    try:
        result = _run(lambda: uploader.upload_image(local, folder), local.name)
    finally:
        os.unlink(local.path)

    logger.info("Uploaded image", filename=local.name, url=result.url)
    return result


@router.post("/image-url", response_model=UploadResult)
def upload_image_url(
    request: ImageUrlUploadRequest,
    uploader: Uploader = Depends(get_uploader)
):
    """
    Download a remote image, resize it to a square and store it.

    Args:
        request: Image URL, optional folder and target dimension

    Returns:
        Name of the resized image and its public URL
    """
    image = RemoteURL(url=request.url, dimension=request.dimension)
    result = _run(lambda: uploader.upload_image(image, request.folder), request.url)

    logger.info("Uploaded remote image", source=request.url, url=result.url)
    return result
