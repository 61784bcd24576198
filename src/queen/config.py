"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

_TRUE = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, upload_dir="custom-storage")
    """

    # Server (read by whatever ASGI server hosts the app)
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # Logging
    log_level: str = "info"

    # Uploads: pass to App.multipart(config.upload_dir)
    upload_dir: str | Path = "uploads"

    # Response.send_file read size
    file_chunk_size: int = 64 * 1024

    @classmethod
    def from_env(
        cls,
        prefix: str = "QUEEN_",
        environ: Mapping[str, str] | None = None,
    ) -> "AppConfig":
        """Build a config from environment variables.

        Reads ``{prefix}HOST``, ``{prefix}PORT``, ``{prefix}DEBUG``,
        ``{prefix}LOG_LEVEL``, ``{prefix}UPLOAD_DIR`` and
        ``{prefix}FILE_CHUNK_SIZE``. A bare ``PORT`` is honoured when the
        prefixed one is absent. Unset variables keep their defaults.

        Raises ``ValueError`` if a numeric variable is not an integer.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        port = env.get(f"{prefix}PORT") or env.get("PORT")
        chunk_size = env.get(f"{prefix}FILE_CHUNK_SIZE")
        debug = env.get(f"{prefix}DEBUG")

        return cls(
            host=env.get(f"{prefix}HOST", defaults.host),
            port=int(port) if port else defaults.port,
            debug=debug.strip().lower() in _TRUE if debug is not None else defaults.debug,
            log_level=env.get(f"{prefix}LOG_LEVEL", defaults.log_level),
            upload_dir=env.get(f"{prefix}UPLOAD_DIR", defaults.upload_dir),
            file_chunk_size=int(chunk_size) if chunk_size else defaults.file_chunk_size,
        )


def configure_logging(config: AppConfig) -> None:
    """Attach a stderr handler to the ``queen`` logger at ``config.log_level``.

    Optional — the library itself never installs handlers.
    """
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logger = logging.getLogger("queen")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
