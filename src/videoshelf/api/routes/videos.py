"""Video record endpoints.

POST   /createvideo                           - Register a video (bearer)
GET    /allvideos                             - List every video
GET    /uservideos/{user_id}                  - List one user's videos
DELETE /deleteuservideos/{user_id}/{video_id} - Delete an owned video
PUT    /updateuservideos/{user_id}/{video_id} - Retitle an owned video
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from videoshelf.api.app import get_db_session
from videoshelf.auth.tokens import get_current_user, get_owner_if_enforced
from videoshelf.db.repo import DbSession
from videoshelf.models.domain import UserEntity
from videoshelf.models.types import (
    AllVideosResponse,
    CreateVideoRequest,
    MessageResponse,
    UpdateTitleRequest,
    UserVideosResponse,
    VideoCreatedResponse,
    VideoListing,
    VideoRecord,
    VideoUpdatedResponse,
)
from videoshelf.videos import service
from videoshelf.videos.service import UploadInput

router = APIRouter()


@router.post("/createvideo", response_model=VideoCreatedResponse, status_code=201)
def create_video(
    body: CreateVideoRequest,
    user: UserEntity = Depends(get_current_user),
    session: DbSession = Depends(get_db_session),
) -> VideoCreatedResponse:
    """Register a video url for the authenticated user.

    Raises:
        ValidationError: 400 if url/title missing or url already registered.
    """
    video = service.upload_video(
        session,
        user,
        UploadInput(url=body.url, title=body.title, description=body.description),
    )
    return VideoCreatedResponse(
        message="Video uploaded successfully!",
        video=VideoRecord.from_entity(video),
    )


@router.get("/allvideos", response_model=AllVideosResponse)
def get_all_videos(session: DbSession = Depends(get_db_session)) -> AllVideosResponse:
    """List every video with its uploader's username and email.

    Raises:
        NotFound: 404 if there are no videos.
    """
    videos = service.list_all_videos(session)
    return AllVideosResponse(
        message="Videos fetched successfully!",
        videos=[VideoListing.from_entity(v) for v in videos],
    )


@router.get("/uservideos/{user_id}", response_model=UserVideosResponse)
def get_user_videos(
    user_id: str,
    session: DbSession = Depends(get_db_session),
) -> UserVideosResponse:
    """List the videos uploaded by one user."""
    videos = service.list_user_videos(session, user_id)
    return UserVideosResponse(
        message="Videos fetched successfully!",
        videos=[VideoListing.from_entity(v) for v in videos],
    )


@router.delete("/deleteuservideos/{user_id}/{video_id}", response_model=MessageResponse)
def delete_user_video(
    user_id: str,
    video_id: str,
    caller: UserEntity | None = Depends(get_owner_if_enforced),
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    """Delete a video owned by user_id.

    Raises:
        ValidationError: 400 on malformed ids.
        NotFound: 404 if the video is missing or owned by someone else.
    """
    service.delete_user_video(session, user_id, video_id, caller=caller)
    return MessageResponse(message="Video deleted successfully.")


@router.put("/updateuservideos/{user_id}/{video_id}", response_model=VideoUpdatedResponse)
def update_video_title(
    user_id: str,
    video_id: str,
    body: UpdateTitleRequest,
    caller: UserEntity | None = Depends(get_owner_if_enforced),
    session: DbSession = Depends(get_db_session),
) -> VideoUpdatedResponse:
    """Change the title of a video owned by user_id."""
    video = service.update_video_title(session, user_id, video_id, body.title, caller=caller)
    return VideoUpdatedResponse(
        message="Video title updated successfully.",
        video=VideoRecord.from_entity(video),
    )
