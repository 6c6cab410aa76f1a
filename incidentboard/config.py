"""
Incidentboard Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Leaderboard sizes: rows per global view and per category view
    LEADERBOARD_TOP_N: int = int(os.getenv("LEADERBOARD_TOP_N", "10"))
    CATEGORY_TOP_N: int = int(os.getenv("CATEGORY_TOP_N", "5"))

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATASET_PATH: Path = Path(
        os.getenv("DATASET_PATH", str(PROJECT_ROOT / "examples" / "agency" / "dataset.json"))
    )

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are unusable."""
        if cls.LEADERBOARD_TOP_N <= 0:
            raise ValueError(
                f"LEADERBOARD_TOP_N must be positive (got {cls.LEADERBOARD_TOP_N})"
            )

        if cls.CATEGORY_TOP_N <= 0:
            raise ValueError(
                f"CATEGORY_TOP_N must be positive (got {cls.CATEGORY_TOP_N})"
            )

    @classmethod
    def is_debug(cls) -> bool:
        return cls.LOG_LEVEL.upper() == "DEBUG"

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Incidentboard Configuration:",
            f"  Leaderboard Top N: {cls.LEADERBOARD_TOP_N}",
            f"  Category Top N: {cls.CATEGORY_TOP_N}",
            f"  Dataset: {cls.DATASET_PATH}",
            f"  Log Level: {cls.LOG_LEVEL}",
        ]
        return "\n".join(lines)
