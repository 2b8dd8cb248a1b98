"""
CORS configuration.
"""

from dataclasses import dataclass, field

DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5500"]


@dataclass
class CORSConfig:
    """Origins allowed to call the dashboard API (the static pages may be served elsewhere)."""

    headers: list[str] = field(default_factory=lambda: ["*"])
    origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
