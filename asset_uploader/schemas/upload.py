from typing import Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class StorageSettings(BaseModel):
    """Snapshot of the credentials and bucket layout used for uploads."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str = ""
    secret_access_key: str = ""
    region: str = ""
    bucket: str = ""
    upload_path: str = ""
    host: str = ""


class SettingsUpdate(BaseModel):
    """Partial settings; absent or empty fields keep the current value."""

    model_config = ConfigDict(populate_by_name=True)

    plugin: Optional[str] = None
    access_key_id: Optional[str] = Field(None, alias="accessKeyId")
    secret_access_key: Optional[str] = Field(None, alias="secretAccessKey")
    region: Optional[str] = None
    bucket: Optional[str] = None
    upload_path: Optional[str] = Field(None, alias="uploadPath")
    host: Optional[str] = None


class LocalFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["file"] = "file"
    size: int = Field(0, ge=0)
    path: str = ""
    name: str = ""
    # Temp upload paths often lack an extension; the client's filename has it
    original_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("originalName", "originalname", "original_name")
    )


class RemoteURL(BaseModel):
    kind: Literal["url"] = "url"
    url: str
    dimension: Optional[int] = Field(None, gt=0)
    name: Optional[str] = None
    # Declared by some hosts; checked against the size limit when present
    size: Optional[int] = Field(None, ge=0)


ImageSource = Union[LocalFile, RemoteURL]


def parse_image_source(payload: Dict[str, Any]) -> ImageSource:
    """Decide once whether a loosely typed image payload is a URL or a file."""
    if payload.get("url"):
        return RemoteURL.model_validate(payload)
    return LocalFile.model_validate(payload)


class FileUploadPayload(BaseModel):
    """Loosely typed ``{"file": {...}, "folder": ...}`` host payload."""

    file: Optional[LocalFile] = None
    folder: Optional[str] = None


class ImageUploadPayload(BaseModel):
    """Loosely typed ``{"image": {...}, "folder": ..., "dimension": ...}`` host payload."""

    image: Optional[Dict[str, Any]] = None
    folder: Optional[str] = None
    dimension: Optional[int] = Field(None, gt=0)


class UploadResult(BaseModel):
    name: str
    url: str


class ImageUrlUploadRequest(BaseModel):
    url: str
    folder: str = ""
    dimension: Optional[int] = Field(None, gt=0)


class ReloadSettingsRequest(BaseModel):
    plugin: Optional[str] = None


class ReloadSettingsResponse(BaseModel):
    status: str = "reloaded"
