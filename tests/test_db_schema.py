"""Tests for database schema invariants.

Invariants:
1. At most one video per url
2. Usernames and emails are unique
3. Video description defaults to empty, uploaded_at to creation time
4. The internal version counter advances on every update
"""

import pytest
from sqlalchemy.exc import IntegrityError

from videoshelf.db.schema import Base, User, Video


def _user(username: str = "alice", email: str = "alice@example.com") -> User:
    return User(username=username, email=email, password="hashed")


class TestSchemaCreation:
    """Test that schema can be created without errors."""

    def test_all_tables_created(self, engine):
        """All required tables should exist after creation."""
        assert {"users", "videos"}.issubset(Base.metadata.tables.keys())


class TestVideoDefaults:
    """Defaults applied on insert."""

    def test_description_defaults_to_empty(self, session):
        user = _user()
        session.add(user)
        session.flush()
        video = Video(url="https://youtu.be/a", title="A", uploaded_by=user.id)
        session.add(video)
        session.commit()

        assert video.description == ""
        assert video.uploaded_at is not None
        assert len(video.id) == 24

    def test_version_starts_at_one(self, session):
        user = _user()
        session.add(user)
        session.flush()
        video = Video(url="https://youtu.be/a", title="A", uploaded_by=user.id)
        session.add(video)
        session.commit()

        assert video.version == 1

    def test_version_increments_on_update(self, session):
        user = _user()
        session.add(user)
        session.flush()
        video = Video(url="https://youtu.be/a", title="A", uploaded_by=user.id)
        session.add(video)
        session.commit()

        video.title = "B"
        session.commit()

        assert video.version == 2


class TestVideoUrlUniqueness:
    """Invariant: videos unique per url."""

    def test_duplicate_url_rejected(self, session):
        """Same url twice, even from different users, violates the constraint."""
        alice = _user()
        bob = _user("bob", "bob@example.com")
        session.add_all([alice, bob])
        session.flush()

        session.add(Video(url="https://youtu.be/a", title="A", uploaded_by=alice.id))
        session.commit()

        session.add(Video(url="https://youtu.be/a", title="Again", uploaded_by=bob.id))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_different_urls_allowed(self, session):
        alice = _user()
        session.add(alice)
        session.flush()

        session.add(Video(url="https://youtu.be/a", title="A", uploaded_by=alice.id))
        session.add(Video(url="https://youtu.be/b", title="B", uploaded_by=alice.id))
        session.commit()

        assert session.query(Video).count() == 2


class TestUserUniqueness:
    """Invariant: usernames and emails unique."""

    def test_duplicate_username_rejected(self, session):
        session.add(_user("alice", "a1@example.com"))
        session.commit()
        session.add(_user("alice", "a2@example.com"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_duplicate_email_rejected(self, session):
        session.add(_user("alice", "same@example.com"))
        session.commit()
        session.add(_user("bob", "same@example.com"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_user_videos_relationship(self, session):
        """A user's videos are reachable through the relationship."""
        alice = _user()
        session.add(alice)
        session.flush()
        session.add(Video(url="https://youtu.be/a", title="A", uploaded_by=alice.id))
        session.commit()
        session.expire_all()

        assert [v.url for v in alice.videos] == ["https://youtu.be/a"]
