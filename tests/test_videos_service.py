"""Tests for video record operations.

Covers validation, duplicate handling (pre-check and store constraint),
ownership lookups and the empty-list-is-404 behaviour.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from videoshelf.core.errors import InternalError, NotFound, ValidationError
from videoshelf.core.identity import new_record_id
from videoshelf.db import repo
from videoshelf.db.schema import Video
from videoshelf.models.domain import UserEntity
from videoshelf.videos import service
from videoshelf.videos.service import UploadInput


@pytest.fixture
def alice(session) -> UserEntity:
    user = repo.create_user(session, "alice", "alice@example.com", "hashed")
    session.commit()
    return user


@pytest.fixture
def bob(session) -> UserEntity:
    user = repo.create_user(session, "bob", "bob@example.com", "hashed")
    session.commit()
    return user


class TestUploadVideo:
    """Tests for upload_video."""

    def test_creates_video_owned_by_uploader(self, session, alice):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        assert video.uploaded_by == alice.id
        assert video.title == "A"
        assert video.description == ""
        assert session.query(Video).count() == 1

    def test_keeps_description(self, session, alice):
        video = service.upload_video(
            session, alice, UploadInput(url="https://youtu.be/a", title="A", description="intro")
        )
        assert video.description == "intro"

    @pytest.mark.parametrize(
        "url,title",
        [(None, "A"), ("https://youtu.be/a", None), ("", "A"), ("https://youtu.be/a", "")],
    )
    def test_requires_url_and_title(self, session, alice, url, title):
        with pytest.raises(ValidationError) as exc_info:
            service.upload_video(session, alice, UploadInput(url=url, title=title))
        assert exc_info.value.message == "URL and title are required!"
        assert session.query(Video).count() == 0

    def test_whitespace_title_is_only_checked_for_presence(self, session, alice):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="  "))
        assert video.title == "  "

    def test_duplicate_url_rejected_by_precheck(self, session, alice, bob):
        """Second upload of a url fails, whoever uploads it."""
        service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        with pytest.raises(ValidationError) as exc_info:
            service.upload_video(session, bob, UploadInput(url="https://youtu.be/a", title="Mine"))

        assert exc_info.value.message == "This video already exists!"
        assert session.query(Video).count() == 1

    def test_duplicate_from_store_constraint_reported_the_same(self, session, alice):
        """A racing insert caught only by the unique constraint looks like the pre-check."""
        service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        # Simulate the pre-check missing the concurrent insert
        with patch.object(repo, "find_video_by_url", return_value=None):
            with pytest.raises(ValidationError) as exc_info:
                service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="B"))

        assert exc_info.value.message == "This video already exists!"
        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert session.query(Video).count() == 1

    def test_store_failure_is_internal_error(self, session, alice):
        error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(repo, "create_video", side_effect=error):
            with pytest.raises(InternalError) as exc_info:
                service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        assert exc_info.value.status_code == 500
        assert "disk I/O error" in exc_info.value.error


class TestListVideos:
    """Tests for list_all_videos and list_user_videos."""

    def test_all_videos_empty_is_not_found(self, session):
        with pytest.raises(NotFound) as exc_info:
            service.list_all_videos(session)
        assert exc_info.value.message == "No videos found!"

    def test_all_videos_expands_uploader(self, session, alice, bob):
        service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))
        service.upload_video(session, bob, UploadInput(url="https://youtu.be/b", title="B"))

        videos = service.list_all_videos(session)

        assert [v.video.url for v in videos] == ["https://youtu.be/a", "https://youtu.be/b"]
        assert videos[0].uploader.username == "alice"
        assert videos[0].uploader.email == "alice@example.com"
        assert videos[1].uploader.username == "bob"

    def test_user_videos_filters_by_uploader(self, session, alice, bob):
        service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))
        service.upload_video(session, bob, UploadInput(url="https://youtu.be/b", title="B"))

        videos = service.list_user_videos(session, alice.id)

        assert len(videos) == 1
        assert videos[0].video.uploaded_by == alice.id

    def test_user_videos_accepts_uppercase_id(self, session, alice):
        service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))
        assert len(service.list_user_videos(session, alice.id.upper())) == 1

    def test_user_videos_invalid_id(self, session):
        with pytest.raises(ValidationError) as exc_info:
            service.list_user_videos(session, "not-an-id")
        assert exc_info.value.message == "Invalid or missing User ID!"

    def test_user_videos_empty_is_not_found(self, session, alice):
        with pytest.raises(NotFound) as exc_info:
            service.list_user_videos(session, alice.id)
        assert exc_info.value.message == "No videos found for this user!"


class TestDeleteUserVideo:
    """Tests for delete_user_video."""

    def test_deletes_owned_video(self, session, alice):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        service.delete_user_video(session, alice.id, video.id)

        assert session.query(Video).count() == 0

    def test_foreign_and_missing_video_indistinguishable(self, session, alice, bob):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        with pytest.raises(NotFound) as foreign:
            service.delete_user_video(session, bob.id, video.id)
        with pytest.raises(NotFound) as missing:
            service.delete_user_video(session, alice.id, new_record_id())

        assert foreign.value.to_payload() == missing.value.to_payload()
        assert session.query(Video).count() == 1

    def test_invalid_ids(self, session, alice):
        with pytest.raises(ValidationError) as exc_info:
            service.delete_user_video(session, alice.id, "bad")
        assert exc_info.value.message == "Invalid userId or videoId."

    def test_caller_must_match_user(self, session, alice, bob):
        """With an enforced caller, acting for another user looks like a miss."""
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        with pytest.raises(NotFound):
            service.delete_user_video(session, alice.id, video.id, caller=bob)

        service.delete_user_video(session, alice.id, video.id, caller=alice)
        assert session.query(Video).count() == 0


class TestUpdateVideoTitle:
    """Tests for update_video_title."""

    def test_updates_title_only(self, session, alice):
        video = service.upload_video(
            session, alice, UploadInput(url="https://youtu.be/a", title="A", description="d")
        )

        updated = service.update_video_title(session, alice.id, video.id, "New title")

        assert updated.title == "New title"
        assert updated.url == video.url
        assert updated.description == "d"
        assert updated.uploaded_at == video.uploaded_at

    @pytest.mark.parametrize("title", [None, "", "   ", "\t\n"])
    def test_blank_title_rejected_and_stored_title_kept(self, session, alice, title):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        with pytest.raises(ValidationError) as exc_info:
            service.update_video_title(session, alice.id, video.id, title)

        assert exc_info.value.message == "Title cannot be empty."
        session.expire_all()
        assert session.query(Video).one().title == "A"

    def test_foreign_and_missing_video_indistinguishable(self, session, alice, bob):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        with pytest.raises(NotFound) as foreign:
            service.update_video_title(session, bob.id, video.id, "Hijack")
        with pytest.raises(NotFound) as missing:
            service.update_video_title(session, alice.id, new_record_id(), "X")

        assert foreign.value.message == missing.value.message
        session.expire_all()
        assert session.query(Video).one().title == "A"

    def test_invalid_ids(self, session):
        with pytest.raises(ValidationError):
            service.update_video_title(session, "bad", "also-bad", "T")

    def test_caller_must_match_user(self, session, alice, bob):
        video = service.upload_video(session, alice, UploadInput(url="https://youtu.be/a", title="A"))

        with pytest.raises(NotFound):
            service.update_video_title(session, alice.id, video.id, "Taken", caller=bob)
        session.expire_all()
        assert session.query(Video).one().title == "A"

        updated = service.update_video_title(session, alice.id, video.id, "Renamed", caller=alice)
        assert updated.title == "Renamed"
