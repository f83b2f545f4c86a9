"""Domain models for videoshelf.

Plain dataclasses independent of SQLAlchemy, returned by the repository
and consumed by services and routes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# ============================================================================
# User Domain
# ============================================================================


@dataclass
class UserEntity:
    """Domain model for a user. The password never leaves the repository."""

    id: str
    username: str
    email: str


@dataclass
class UploaderSummary:
    """Restricted view of a user, used when expanding a video's uploader."""

    id: str
    username: str
    email: str


# ============================================================================
# Video Domain
# ============================================================================


@dataclass
class VideoEntity:
    """Domain model for a video record."""

    id: str
    url: str
    title: str
    description: str
    uploaded_by: str
    uploaded_at: datetime


@dataclass
class VideoWithUploader:
    """Video record with its uploader expanded.

    ``uploader`` is None when the referenced user no longer exists.
    """

    video: VideoEntity
    uploader: UploaderSummary | None


# ============================================================================
# Extraction Domain
# ============================================================================


@dataclass
class VideoFormat:
    """One downloadable encoding of a remote video."""

    quality_label: str | None
    container: str | None
    url: str | None


@dataclass
class StreamSource:
    """A resolved upstream media source, ready to be opened."""

    url: str
    container: str
    http_headers: dict[str, str]
    format_id: str | None = None
