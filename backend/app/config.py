"""
Palette Service Configuration
Manages environment variables and defaults for the extraction service.
"""
import os
from typing import Literal

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Configuration class for the palette extraction service."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")
    LOG_JSON: bool = os.environ.get("PALETTE_LOG_JSON", "false").lower() in ("1", "true", "yes")

    # Remote fetch
    FETCH_TIMEOUT_S: float = float(os.environ.get("PALETTE_FETCH_TIMEOUT_S", "10"))
    USER_AGENT: str = os.environ.get("PALETTE_USER_AGENT", "urvinyl.rocks")
    MAX_FILE_MB: int = int(os.environ.get("PALETTE_MAX_FILE_MB", "10"))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PALETTE_ALLOWED_ORIGINS", "*")

    # Extraction defaults
    DEFAULT_STRATEGY: Literal["grid", "kmeans"] = os.environ.get("PALETTE_DEFAULT_STRATEGY", "grid")
    GRID_ROWS: int = int(os.environ.get("PALETTE_GRID_ROWS", "4"))
    GRID_COLS: int = int(os.environ.get("PALETTE_GRID_COLS", "4"))
    KMEANS_K: int = int(os.environ.get("PALETTE_KMEANS_K", "5"))
    KMEANS_MAX_ITER: int = int(os.environ.get("PALETTE_KMEANS_MAX_ITER", "100"))
    NORMALIZATION: Literal["actual", "theoretical"] = os.environ.get("PALETTE_NORMALIZATION", "actual")

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/gif"]

    @property
    def max_file_bytes(self) -> int:
        return self.MAX_FILE_MB * 1024 * 1024

    @property
    def allowed_origins(self) -> list:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
