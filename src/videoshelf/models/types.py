"""Pydantic models for the videoshelf API.

Wire names are camelCase (``uploadedBy``, ``qualityLabel``); Python
attributes stay snake_case. Request bodies accept missing fields so that the
service layer can answer with a 400 and a readable message.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from videoshelf.models.domain import (
    UploaderSummary,
    VideoEntity,
    VideoFormat,
    VideoWithUploader,
)

UNKNOWN_QUALITY = "Unknown Quality"


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Requests
# ============================================================================


class CreateVideoRequest(ApiModel):
    """Body of POST /createvideo."""

    url: str | None = None
    title: str | None = None
    description: str | None = None


class UpdateTitleRequest(ApiModel):
    """Body of PUT /updateuservideos/{userId}/{videoId}."""

    title: str | None = None


class FormatsRequest(ApiModel):
    """Body of POST /video/formats."""

    url: str | None = None


class FormatChoice(ApiModel):
    """Requested (container, quality) pair for a download."""

    container: str | None = None
    quality: str | None = None


class DownloadRequest(ApiModel):
    """Body of POST /video/download."""

    url: str | None = None
    format: FormatChoice | None = None


# ============================================================================
# Responses
# ============================================================================


class UploaderDetail(ApiModel):
    """Uploader projection: id, username and email only."""

    id: str
    username: str
    email: str

    @classmethod
    def from_summary(cls, summary: UploaderSummary) -> "UploaderDetail":
        return cls(id=summary.id, username=summary.username, email=summary.email)


class VideoRecord(ApiModel):
    """A stored video as returned after create/update."""

    id: str
    url: str
    title: str
    description: str
    uploaded_by: str
    uploaded_at: datetime

    @classmethod
    def from_entity(cls, video: VideoEntity) -> "VideoRecord":
        return cls(
            id=video.id,
            url=video.url,
            title=video.title,
            description=video.description,
            uploaded_by=video.uploaded_by,
            uploaded_at=video.uploaded_at,
        )


class VideoListing(ApiModel):
    """A stored video with the uploader expanded."""

    id: str
    url: str
    title: str
    description: str
    uploaded_by: UploaderDetail | None
    uploaded_at: datetime

    @classmethod
    def from_entity(cls, item: VideoWithUploader) -> "VideoListing":
        video = item.video
        return cls(
            id=video.id,
            url=video.url,
            title=video.title,
            description=video.description,
            uploaded_by=UploaderDetail.from_summary(item.uploader) if item.uploader else None,
            uploaded_at=video.uploaded_at,
        )


class FormatInfo(ApiModel):
    """One available format of a remote video."""

    quality_label: str
    container: str | None
    url: str | None

    @classmethod
    def from_format(cls, fmt: VideoFormat) -> "FormatInfo":
        return cls(
            quality_label=fmt.quality_label or UNKNOWN_QUALITY,
            container=fmt.container,
            url=fmt.url,
        )


class MessageResponse(ApiModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str


class VideoCreatedResponse(ApiModel):
    message: str
    video: VideoRecord


class VideoUpdatedResponse(ApiModel):
    success: bool = True
    message: str
    video: VideoRecord


class AllVideosResponse(ApiModel):
    message: str
    videos: list[VideoListing]


class UserVideosResponse(ApiModel):
    success: bool = True
    message: str
    videos: list[VideoListing]


class FormatsResponse(ApiModel):
    message: str
    formats: list[FormatInfo]
