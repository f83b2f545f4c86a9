"""Video record operations.

Validation and ownership rules live here; database access goes through
repo. Every failure is raised as an AppError subclass so the API layer can
render it; store errors are rolled back and surfaced as InternalError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from videoshelf.core.errors import InternalError, NotFound, ValidationError
from videoshelf.core.identity import is_valid_record_id, normalize_record_id
from videoshelf.db import repo
from videoshelf.db.repo import DbSession
from videoshelf.models.domain import UserEntity, VideoEntity, VideoWithUploader

logger = logging.getLogger(__name__)

DUPLICATE_VIDEO = "This video already exists!"
NOT_OWNED = "Video not found or does not belong to the user."


@dataclass
class UploadInput:
    """Input for video upload."""

    url: str | None
    title: str | None
    description: str | None = None


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _require_ids(user_id: str, video_id: str) -> tuple[str, str]:
    if not is_valid_record_id(user_id) or not is_valid_record_id(video_id):
        raise ValidationError("Invalid userId or videoId.")
    return normalize_record_id(user_id), normalize_record_id(video_id)


def _check_caller(caller: UserEntity | None, user_id: str) -> None:
    # A caller acting on someone else's videos sees the same 404 as a miss
    if caller is not None and caller.id != user_id:
        raise NotFound(NOT_OWNED)


def upload_video(session: DbSession, uploader: UserEntity, upload: UploadInput) -> VideoEntity:
    """Register a new video owned by the uploader.

    The url pre-check and the insert are not atomic; the unique constraint
    on url catches a concurrent duplicate and it is reported the same way.

    Raises:
        ValidationError: Missing url/title, or url already registered.
        InternalError: Store failure.
    """
    if not upload.url or not upload.title:
        raise ValidationError("URL and title are required!")

    try:
        if repo.find_video_by_url(session, upload.url) is not None:
            raise ValidationError(DUPLICATE_VIDEO)

        video = repo.create_video(
            session,
            url=upload.url,
            title=upload.title,
            uploaded_by=uploader.id,
            description=upload.description or "",
        )
        repo.commit(session)
    except IntegrityError as e:
        repo.rollback(session)
        logger.info(f"Duplicate video insert rejected by store: {upload.url}")
        raise ValidationError(DUPLICATE_VIDEO) from e
    except SQLAlchemyError as e:
        repo.rollback(session)
        logger.error(f"Error in upload_video: {e}")
        raise InternalError("Server error", str(e)) from e

    logger.info(f"User {uploader.id} uploaded video {video.id}")
    return video


def list_all_videos(session: DbSession) -> list[VideoWithUploader]:
    """Get every video with its uploader.

    Raises:
        NotFound: No videos at all.
    """
    try:
        videos = repo.list_videos_with_uploader(session)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching videos: {e}")
        raise InternalError("Server error") from e

    if not videos:
        raise NotFound("No videos found!")
    return videos


def list_user_videos(session: DbSession, user_id: str) -> list[VideoWithUploader]:
    """Get the videos uploaded by one user.

    Raises:
        ValidationError: Malformed user id.
        NotFound: The user has no videos.
    """
    if not is_valid_record_id(user_id):
        raise ValidationError("Invalid or missing User ID!")

    try:
        videos = repo.list_videos_for_user(session, normalize_record_id(user_id))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching videos for user {user_id}: {e}")
        raise InternalError("Server error while fetching videos.", str(e)) from e

    if not videos:
        raise NotFound("No videos found for this user!")
    return videos


def delete_user_video(
    session: DbSession,
    user_id: str,
    video_id: str,
    caller: UserEntity | None = None,
) -> None:
    """Delete a video if it belongs to the user.

    Ownership is checked by looking the video up with both ids; a missing
    video and someone else's video give the same NotFound.

    Raises:
        ValidationError: Malformed ids.
        NotFound: No video with this id owned by this user.
    """
    user_id, video_id = _require_ids(user_id, video_id)
    _check_caller(caller, user_id)

    try:
        video = repo.get_owned_video(session, video_id, user_id)
        if video is None:
            raise NotFound(NOT_OWNED)
        repo.delete_video(session, video.id)
        repo.commit(session)
    except SQLAlchemyError as e:
        repo.rollback(session)
        logger.error(f"Error during deleting user video: {e}")
        raise InternalError("Server error while deleting the video.", str(e)) from e

    logger.info(f"Deleted video {video_id} of user {user_id}")


def update_video_title(
    session: DbSession,
    user_id: str,
    video_id: str,
    title: str | None,
    caller: UserEntity | None = None,
) -> VideoEntity:
    """Change the title of a video that belongs to the user.

    The title is stored as sent; it is only trimmed to check for blanks.

    Raises:
        ValidationError: Malformed ids or blank title.
        NotFound: No video with this id owned by this user.
    """
    user_id, video_id = _require_ids(user_id, video_id)
    if _blank(title):
        raise ValidationError("Title cannot be empty.")
    _check_caller(caller, user_id)

    try:
        video = repo.get_owned_video(session, video_id, user_id)
        if video is None:
            raise NotFound(NOT_OWNED)
        updated = repo.update_video_title(session, video.id, title)
        repo.commit(session)
    except SQLAlchemyError as e:
        repo.rollback(session)
        logger.error(f"Error during updating video title: {e}")
        raise InternalError("Server error while updating the video title.", str(e)) from e

    if updated is None:
        # Deleted between lookup and update
        raise NotFound(NOT_OWNED)
    return updated
