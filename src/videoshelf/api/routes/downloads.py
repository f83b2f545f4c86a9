"""Download passthrough endpoints.

POST /video/formats  - List downloadable formats of a remote video (bearer)
POST /video/download - Stream one format of a remote video (bearer)
"""

from __future__ import annotations

import logging
import re
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from videoshelf.api.app import get_app_settings, get_extractor
from videoshelf.auth.tokens import get_current_user
from videoshelf.config import Settings
from videoshelf.core.errors import UpstreamError, ValidationError
from videoshelf.extractor.base import ExtractorBase, MediaStream
from videoshelf.models.domain import UserEntity
from videoshelf.models.types import DownloadRequest, FormatInfo, FormatsRequest, FormatsResponse

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_URL = "Invalid or missing YouTube URL!"

_CONTAINER = re.compile(r"[A-Za-z0-9]{1,10}")


def _require_supported_url(extractor: ExtractorBase, url: str | None) -> str:
    if not url or not extractor.is_valid_url(url):
        raise ValidationError(INVALID_URL)
    return url


def _relay(stream: MediaStream, chunk_size: int, label: str) -> Iterator[bytes]:
    """Yield upstream chunks; an upstream failure ends the body early.

    Headers are already sent by the time this runs, so a failure can only
    be logged and the response cut short.
    """
    sent = 0
    try:
        for chunk in stream.iter_chunks(chunk_size):
            sent += len(chunk)
            yield chunk
    except UpstreamError as e:
        logger.error(f"Upstream stream for {label} failed after {sent} bytes: {e.error}")
    finally:
        stream.close()
        logger.info(f"Download of {label} finished, {sent} bytes relayed")


@router.post("/video/formats", response_model=FormatsResponse)
def list_formats(
    body: FormatsRequest,
    user: UserEntity = Depends(get_current_user),
    extractor: ExtractorBase = Depends(get_extractor),
) -> FormatsResponse:
    """List the formats available for a remote video.

    Raises:
        ValidationError: 400 if url is missing or unsupported.
        UpstreamError: 500 with the backend's message if the fetch fails.
    """
    url = _require_supported_url(extractor, body.url)
    formats = extractor.list_formats(url)
    return FormatsResponse(
        message="Formats fetched successfully!",
        formats=[FormatInfo.from_format(f) for f in formats],
    )


@router.post("/video/download")
def download_video(
    body: DownloadRequest,
    user: UserEntity = Depends(get_current_user),
    extractor: ExtractorBase = Depends(get_extractor),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    """Stream a remote video in the requested container and quality.

    The source is resolved and the upstream connection opened before the
    response starts, so those failures still produce a JSON error.
    """
    url = _require_supported_url(extractor, body.url)

    choice = body.format
    if choice is None or not choice.container or not choice.quality:
        raise ValidationError("Format details are required!")
    # The container names the attachment, so keep it to a bare extension
    if not _CONTAINER.fullmatch(choice.container):
        raise ValidationError("Invalid format container!")

    source = extractor.resolve_stream(url, choice.container, choice.quality)
    stream = extractor.open_stream(source)
    logger.info(f"User {user.id} downloading {url} as {choice.quality}/{choice.container}")

    return StreamingResponse(
        _relay(stream, settings.stream_chunk_size, url),
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="video.{choice.container}"'},
    )
