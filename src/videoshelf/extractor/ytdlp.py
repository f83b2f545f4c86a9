"""yt-dlp backed extractor.

Uses the yt-dlp Python API for URL validation, metadata extraction and
format selection, and yt-dlp's own networking stack to relay media bytes
(so the per-format HTTP headers the platform expects are sent upstream).
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yt_dlp
from yt_dlp.extractor import get_info_extractor
from yt_dlp.networking import Request
from yt_dlp.networking.exceptions import RequestError
from yt_dlp.utils import DownloadError

from videoshelf.core.errors import UpstreamError
from videoshelf.extractor.base import ExtractorBase, MediaStream
from videoshelf.models.domain import StreamSource, VideoFormat

logger = logging.getLogger(__name__)

DEFAULT_YDL_OPTIONS: dict[str, Any] = {
    "quiet": True,
    "no_warnings": True,
    "noplaylist": True,
    "skip_download": True,
}

_HEIGHT_LABEL = re.compile(r"(\d+)p(\d+)?")


def quality_label_for(fmt: dict[str, Any]) -> str | None:
    """Human quality label for a yt-dlp format dict ("720p", "1080p60").

    Audio-only and unlabeled formats return None.
    """
    if fmt.get("vcodec") == "none":
        return None
    height = fmt.get("height")
    if height:
        fps = fmt.get("fps")
        if fps and fps > 30:
            return f"{height}p{int(round(fps))}"
        return f"{height}p"
    return fmt.get("format_note") or None


def format_from_info(fmt: dict[str, Any]) -> VideoFormat:
    """Project a yt-dlp format dict onto VideoFormat."""
    return VideoFormat(
        quality_label=quality_label_for(fmt),
        container=fmt.get("ext"),
        url=fmt.get("url"),
    )


def build_format_selector(container: str, quality: str) -> str:
    """Translate a (container, quality) choice into a yt-dlp format selector.

    - "highest"/"best" and "lowest"/"worst" pick the best/worst single file
    - "<N>p" (optionally with fps, e.g. "1080p60") caps the height at N
    - an all-digit value is taken as an exact format id
    - anything else is handed to yt-dlp unchanged

    Container-matching files are preferred, falling back to any container.

    Examples:
        >>> build_format_selector("mp4", "highest")
        'best[ext=mp4]/best'
        >>> build_format_selector("webm", "720p")
        'best[height<=720][ext=webm]/best[height<=720]'
        >>> build_format_selector("mp4", "18")
        '18'
    """
    q = quality.strip().lower()
    if q.isdigit():
        return q

    if q in ("", "highest", "best"):
        base = "best"
    elif q in ("lowest", "worst"):
        base = "worst"
    else:
        match = _HEIGHT_LABEL.fullmatch(q)
        if match is None:
            return quality.strip()
        base = f"best[height<={match.group(1)}]"

    ext = container.strip().lower().lstrip(".")
    if not ext:
        return base
    return f"{base}[ext={ext}]/{base}"


class YtDlpMediaStream(MediaStream):
    """Upstream media response opened through a YoutubeDL instance.

    Owns both the YoutubeDL (its request handlers back the response) and
    the response itself.
    """

    def __init__(self, ydl: yt_dlp.YoutubeDL, response: Any):
        self._ydl = ydl
        self._response = response

    def read(self, size: int) -> bytes:
        try:
            return self._response.read(size)
        except (RequestError, OSError) as e:
            raise UpstreamError("Server error", str(e)) from e

    def close(self) -> None:
        try:
            self._response.close()
        finally:
            self._ydl.close()


class YtDlpExtractor(ExtractorBase):
    """Extractor for one yt-dlp supported platform (YouTube by default)."""

    def __init__(self, platform: str = "Youtube", ydl_options: dict[str, Any] | None = None):
        """Initialize extractor.

        Args:
            platform: yt-dlp extractor key whose URL predicate gates requests.
            ydl_options: Extra YoutubeDL options merged over the defaults.

        Raises:
            ValueError: If yt-dlp has no extractor with that key.
        """
        try:
            self._info_extractor = get_info_extractor(platform)
        except (KeyError, AttributeError) as e:
            raise ValueError(f"Unknown yt-dlp extractor: {platform}") from e
        self.platform = platform
        self.ydl_options = {**DEFAULT_YDL_OPTIONS, **(ydl_options or {})}

    def is_valid_url(self, url: str) -> bool:
        if not url:
            return False
        return bool(self._info_extractor.suitable(url))

    def _extract_info(self, url: str, options: dict[str, Any]) -> dict[str, Any]:
        try:
            with yt_dlp.YoutubeDL(options) as ydl:
                info = ydl.extract_info(url, download=False)
        except DownloadError as e:
            logger.warning(f"yt-dlp extraction failed for {url}: {e}")
            raise UpstreamError("Server error", str(e)) from e
        if not info:
            raise UpstreamError("Server error", f"No video information returned for {url}")
        return info

    def list_formats(self, url: str) -> list[VideoFormat]:
        info = self._extract_info(url, self.ydl_options)
        formats = info.get("formats") or []
        logger.debug(f"Found {len(formats)} formats for {url}")
        return [format_from_info(fmt) for fmt in formats]

    def resolve_stream(self, url: str, container: str, quality: str) -> StreamSource:
        selector = build_format_selector(container, quality)
        info = self._extract_info(url, {**self.ydl_options, "format": selector})

        # A selection that needs muxing (video+audio) has no single source
        if info.get("requested_formats"):
            raise UpstreamError(
                "Server error",
                f"Format '{selector}' requires merging separate streams and cannot be relayed",
            )

        media_url = info.get("url")
        if not media_url:
            raise UpstreamError("Server error", f"No downloadable source for format '{selector}'")

        return StreamSource(
            url=media_url,
            container=info.get("ext") or container,
            http_headers=dict(info.get("http_headers") or {}),
            format_id=info.get("format_id"),
        )

    def open_stream(self, source: StreamSource) -> MediaStream:
        ydl = yt_dlp.YoutubeDL(self.ydl_options)
        try:
            response = ydl.urlopen(Request(source.url, headers=source.http_headers))
        except (RequestError, OSError) as e:
            ydl.close()
            logger.warning(f"Could not open upstream stream for format {source.format_id}: {e}")
            raise UpstreamError("Server error", str(e)) from e
        return YtDlpMediaStream(ydl, response)
