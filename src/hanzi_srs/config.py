"""Configuration settings for the flashcard backend."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)

# Scheduling settings
REVIEW_INTERVALS = {1: 1, 2: 3, 3: 7, 4: 14, 5: 30, 6: 60}  # level -> days
LONG_TERM_MIN_DAYS = 90
LONG_TERM_BASE_DAYS = 60
LONG_TERM_GROWTH = 1.5


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///hanzi_srs.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class StudySettings:
    """Study range and scheduling settings."""
    default_range_start: int = int(os.getenv("DEFAULT_RANGE_START", "1"))
    default_range_end: int = int(os.getenv("DEFAULT_RANGE_END", "1000"))
    max_word_id: int = int(os.getenv("MAX_WORD_ID", "1000"))
    relapse_delay_minutes: int = int(os.getenv("RELAPSE_DELAY_MINUTES", "5"))
    easy_bonus: float = float(os.getenv("EASY_BONUS", "1.3"))
    review_intervals: dict[int, int] = field(default_factory=lambda: dict(REVIEW_INTERVALS))


@dataclass
class ContentSettings:
    """Corpus content settings."""
    audio_base_url: str = os.getenv("AUDIO_BASE_URL", "")
    audio_file_extension: str = os.getenv("AUDIO_FILE_EXTENSION", ".mp3")


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_study_settings() -> StudySettings:
    """Get study settings."""
    return StudySettings()


def get_content_settings() -> ContentSettings:
    """Get content settings."""
    return ContentSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    study: StudySettings = field(default_factory=get_study_settings)
    content: ContentSettings = field(default_factory=get_content_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.study.max_word_id < 1:
            raise ValueError("MAX_WORD_ID must be positive")

        if self.study.default_range_start < 1:
            raise ValueError("DEFAULT_RANGE_START must be positive")

        if self.study.default_range_start > self.study.default_range_end:
            raise ValueError("DEFAULT_RANGE_START cannot be greater than DEFAULT_RANGE_END")

        if self.study.default_range_end > self.study.max_word_id:
            raise ValueError("DEFAULT_RANGE_END cannot exceed MAX_WORD_ID")

        if self.study.relapse_delay_minutes < 0:
            raise ValueError("RELAPSE_DELAY_MINUTES cannot be negative")

        if self.study.easy_bonus < 1:
            raise ValueError("EASY_BONUS must be at least 1")


# Create global settings instance
settings = Settings()
settings.validate()
