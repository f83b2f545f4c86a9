"""Video extraction adapters.

Extractors wrap the extraction backend behind a narrow interface so route
code never calls yt-dlp directly.

Structure:
- extractor/base.py  - ExtractorBase and MediaStream interfaces
- extractor/ytdlp.py - yt-dlp implementation
- extractor/mock.py  - canned implementation for tests and demos
"""

from videoshelf.extractor.base import ExtractorBase, MediaStream

__all__ = [
    "ExtractorBase",
    "MediaStream",
]
