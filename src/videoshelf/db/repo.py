"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping services free of ORM details.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from videoshelf.core.identity import new_record_id
from videoshelf.db.schema import User, Video
from videoshelf.models.domain import (
    UploaderSummary,
    UserEntity,
    VideoEntity,
    VideoWithUploader,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _user_to_entity(user: User) -> UserEntity:
    """Convert SQLAlchemy User to domain entity."""
    return UserEntity(
        id=user.id,
        username=user.username,
        email=user.email,
    )


def _user_to_summary(user: User) -> UploaderSummary:
    """Convert SQLAlchemy User to the uploader projection (username, email)."""
    return UploaderSummary(
        id=user.id,
        username=user.username,
        email=user.email,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _video_to_entity(video: Video) -> VideoEntity:
    """Convert SQLAlchemy Video to domain entity."""
    return VideoEntity(
        id=video.id,
        url=video.url,
        title=video.title,
        description=video.description,
        uploaded_by=video.uploaded_by,
        uploaded_at=_as_utc(video.uploaded_at),
    )


def _row_to_video_with_uploader(video: Video, user: User | None) -> VideoWithUploader:
    return VideoWithUploader(
        video=_video_to_entity(video),
        uploader=_user_to_summary(user) if user else None,
    )


# ============================================================================
# User Repository
# ============================================================================


def get_user(session: DbSession, user_id: str) -> UserEntity | None:
    """Get user by ID."""
    user = session.query(User).filter(User.id == user_id).first()
    return _user_to_entity(user) if user else None


def create_user(
    session: DbSession,
    username: str,
    email: str,
    password: str,
    user_id: str | None = None,
) -> UserEntity:
    """Create a user. Used by seeding scripts; the API never creates users."""
    user = User(
        id=user_id or new_record_id(),
        username=username,
        email=email,
        password=password,
    )
    session.add(user)
    session.flush()
    return _user_to_entity(user)


# ============================================================================
# Video Repository
# ============================================================================


def find_video_by_url(session: DbSession, url: str) -> VideoEntity | None:
    """Get video by its url."""
    video = session.query(Video).filter(Video.url == url).first()
    return _video_to_entity(video) if video else None


def create_video(
    session: DbSession,
    url: str,
    title: str,
    uploaded_by: str,
    description: str = "",
) -> VideoEntity:
    """Insert a new video.

    Flushes immediately so a unique-constraint violation on url surfaces
    here as ``sqlalchemy.exc.IntegrityError``.
    """
    video = Video(
        id=new_record_id(),
        url=url,
        title=title,
        description=description,
        uploaded_by=uploaded_by,
    )
    session.add(video)
    session.flush()
    return _video_to_entity(video)


def list_videos_with_uploader(session: DbSession) -> list[VideoWithUploader]:
    """Get every video with its uploader expanded."""
    rows = (
        session.query(Video, User)
        .outerjoin(User, Video.uploaded_by == User.id)
        .order_by(Video.uploaded_at, Video.id)
        .all()
    )
    return [_row_to_video_with_uploader(video, user) for video, user in rows]


def list_videos_for_user(session: DbSession, user_id: str) -> list[VideoWithUploader]:
    """Get all videos uploaded by a user, uploader expanded."""
    rows = (
        session.query(Video, User)
        .outerjoin(User, Video.uploaded_by == User.id)
        .filter(Video.uploaded_by == user_id)
        .order_by(Video.uploaded_at, Video.id)
        .all()
    )
    return [_row_to_video_with_uploader(video, user) for video, user in rows]


def get_owned_video(session: DbSession, video_id: str, user_id: str) -> VideoEntity | None:
    """Get a video only if it is owned by the given user."""
    video = (
        session.query(Video)
        .filter(Video.id == video_id, Video.uploaded_by == user_id)
        .first()
    )
    return _video_to_entity(video) if video else None


def delete_video(session: DbSession, video_id: str) -> bool:
    """Delete a video by ID. Returns False if it was already gone."""
    video = session.query(Video).filter(Video.id == video_id).first()
    if video is None:
        return False
    session.delete(video)
    session.flush()
    return True


def update_video_title(session: DbSession, video_id: str, title: str) -> VideoEntity | None:
    """Set a video's title. Returns the updated entity, or None if missing."""
    video = session.query(Video).filter(Video.id == video_id).first()
    if video is None:
        return None
    video.title = title
    session.flush()
    return _video_to_entity(video)


# ============================================================================
# Transaction Helpers
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit the current transaction."""
    session.commit()


def rollback(session: DbSession) -> None:
    """Roll back the current transaction."""
    session.rollback()
