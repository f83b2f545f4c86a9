"""Base extractor interface.

An extractor wraps a video-extraction backend behind a narrow interface:
- is_valid_url(url) -> bool
- list_formats(url) -> formats
- resolve_stream(url, container, quality) -> source
- open_stream(source) -> media stream

Extractors must NOT touch the database or shape HTTP responses. Backend
failures are raised as ``UpstreamError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from videoshelf.models.domain import StreamSource, VideoFormat


class MediaStream(ABC):
    """An open upstream media response, read chunk by chunk."""

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes. Returns b"" at end of stream."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the upstream connection."""
        pass

    def iter_chunks(self, chunk_size: int) -> Iterator[bytes]:
        """Yield chunks until the upstream is exhausted."""
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                return
            yield chunk


class ExtractorBase(ABC):
    """Abstract base class for video extractors."""

    @abstractmethod
    def is_valid_url(self, url: str) -> bool:
        """Check whether the backend supports this URL for its platform."""
        pass

    @abstractmethod
    def list_formats(self, url: str) -> list[VideoFormat]:
        """Fetch the available formats of a remote video.

        Args:
            url: Video page URL (already validated).

        Returns:
            Formats in the order the backend reports them.

        Raises:
            UpstreamError: If the metadata fetch fails.
        """
        pass

    @abstractmethod
    def resolve_stream(self, url: str, container: str, quality: str) -> StreamSource:
        """Pick the single media source matching a (container, quality) choice.

        Raises:
            UpstreamError: If no source can be resolved.
        """
        pass

    @abstractmethod
    def open_stream(self, source: StreamSource) -> MediaStream:
        """Open the upstream connection for a resolved source.

        Raises:
            UpstreamError: If the connection cannot be opened.
        """
        pass
