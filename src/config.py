"""
Configuration management for the carbon budget engine.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration settings."""

    # Base paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = Path(os.getenv("CARBON_DATA_DIR", str(PROJECT_ROOT / "data")))
    SCENARIOS_DIR: Path = Path(os.getenv("CARBON_SCENARIOS_DIR", str(PROJECT_ROOT / "scenarios")))
    RUNS_DIR: Path = Path(os.getenv("CARBON_RUNS_DIR", "runs"))

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Model settings
    DEFAULT_HORIZON_YEARS: int = int(os.getenv("CARBON_HORIZON_YEARS", "50"))
    DEFAULT_START_YEAR: int = int(os.getenv("CARBON_START_YEAR", "2000"))

    @classmethod
    def ensure_directories(cls) -> None:
        """Ensure the output directory exists."""
        cls.RUNS_DIR.mkdir(parents=True, exist_ok=True)
