"""Application configuration.

AppConfig is a frozen dataclass; immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, strict_routes=True)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Routing: raise ConflictError on duplicate route shapes instead of replacing
    strict_routes: bool = False

    # Limits
    body_limit: int = 4 * 1024 * 1024  # 4 MB
    file_chunk_size: int = 64 * 1024

    # Logging
    log_level: str = "info"
