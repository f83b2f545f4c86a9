"""Mock extractor for tests and offline demos.

Serves canned formats and an in-memory payload without any network access.
Records every call so tests can assert what reached the extractor.
"""

from __future__ import annotations

from urllib.parse import urlparse

from videoshelf.core.errors import UpstreamError
from videoshelf.extractor.base import ExtractorBase, MediaStream
from videoshelf.models.domain import StreamSource, VideoFormat

DEFAULT_HOSTS = ("youtube.com", "www.youtube.com", "m.youtube.com", "youtu.be")

DEFAULT_FORMATS = [
    VideoFormat(quality_label="720p", container="mp4", url="https://media.example/720.mp4"),
    VideoFormat(quality_label="360p", container="webm", url="https://media.example/360.webm"),
    VideoFormat(quality_label=None, container="m4a", url="https://media.example/audio.m4a"),
]


class BytesMediaStream(MediaStream):
    """Media stream over an in-memory payload.

    If ``fail_after`` is set, reading past that many bytes raises
    UpstreamError, simulating an upstream drop mid-transfer.
    """

    def __init__(self, payload: bytes, fail_after: int | None = None):
        self._payload = payload
        self._offset = 0
        self._fail_after = fail_after
        self.closed = False

    def read(self, size: int) -> bytes:
        if self._fail_after is not None and self._offset >= self._fail_after:
            raise UpstreamError("Server error", "upstream connection reset")
        end = self._offset + size
        if self._fail_after is not None:
            end = min(end, self._fail_after)
        chunk = self._payload[self._offset : end]
        self._offset += len(chunk)
        return chunk

    def close(self) -> None:
        self.closed = True


class MockExtractor(ExtractorBase):
    """Extractor returning canned data.

    Args:
        formats: Formats returned by list_formats.
        payload: Bytes served by open_stream.
        hosts: Hostnames accepted by is_valid_url.
        error: If set, list_formats/resolve_stream raise UpstreamError with it.
        fail_after: Byte offset at which streams fail mid-transfer.
    """

    def __init__(
        self,
        formats: list[VideoFormat] | None = None,
        payload: bytes = b"\x00\x00\x00\x18ftypmp42" * 64,
        hosts: tuple[str, ...] = DEFAULT_HOSTS,
        error: str | None = None,
        fail_after: int | None = None,
    ):
        self.formats = list(DEFAULT_FORMATS if formats is None else formats)
        self.payload = payload
        self.hosts = hosts
        self.error = error
        self.fail_after = fail_after
        self.calls: list[tuple[str, ...]] = []
        self.streams: list[BytesMediaStream] = []

    def is_valid_url(self, url: str) -> bool:
        if not url:
            return False
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and parsed.hostname in self.hosts

    def list_formats(self, url: str) -> list[VideoFormat]:
        self.calls.append(("list_formats", url))
        if self.error:
            raise UpstreamError("Server error", self.error)
        return list(self.formats)

    def resolve_stream(self, url: str, container: str, quality: str) -> StreamSource:
        self.calls.append(("resolve_stream", url, container, quality))
        if self.error:
            raise UpstreamError("Server error", self.error)
        return StreamSource(
            url=f"https://media.example/{quality}.{container}",
            container=container,
            http_headers={},
            format_id=quality,
        )

    def open_stream(self, source: StreamSource) -> MediaStream:
        self.calls.append(("open_stream", source.url))
        stream = BytesMediaStream(self.payload, fail_after=self.fail_after)
        self.streams.append(stream)
        return stream
