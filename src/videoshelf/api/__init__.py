"""API module for videoshelf.

API layer:
- Validates inputs, reads/writes DB through services
- Renders AppError subclasses as JSON
- Forbidden: direct yt-dlp calls, raw SQL
"""
