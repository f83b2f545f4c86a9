"""Database schema for videoshelf.

Two tables: users (read-only to the service) and videos. Unique
constraints enforce the storage-level invariants.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from videoshelf.core.identity import new_record_id


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """Account that uploads videos.

    Created outside this service; the password is stored as received
    (hashed upstream) and never checked here.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_record_id)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    videos: Mapped[list["Video"]] = relationship(back_populates="uploader")

    __table_args__ = (
        UniqueConstraint("username", name="uq_user_username"),
        UniqueConstraint("email", name="uq_user_email"),
    )


class Video(Base):
    """A registered video URL.

    Invariant: UNIQUE(url)
    At most one record per distinct url, whoever uploads it.
    """

    __tablename__ = "videos"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_record_id)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    uploaded_by: Mapped[str] = mapped_column(
        String(24), ForeignKey("users.id"), nullable=False, index=True
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    # Internal revision counter, never exposed
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    uploader: Mapped[User] = relationship(back_populates="videos")

    __table_args__ = (UniqueConstraint("url", name="uq_video_url"),)
    __mapper_args__ = {"version_id_col": version}
