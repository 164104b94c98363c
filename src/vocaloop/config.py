"""Configuration settings for VocaLoop."""
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

QUIZ_TYPES = ("multiple", "short", "toefl-complete")


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///vocaloop.db")
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
    """Study session settings."""
    words_per_session: int = int(os.getenv("WORDS_PER_SESSION", "20"))
    default_quiz_type: str = os.getenv("DEFAULT_QUIZ_TYPE", "multiple")
    shuffle_words: bool = os.getenv("SHUFFLE_WORDS", "true").lower() == "true"


@dataclass
class GradingSettings:
    """Local quiz generation and grading settings."""
    similarity_threshold: float = float(os.getenv("SIMILARITY_THRESHOLD", "0.8"))
    choices_per_question: int = int(os.getenv("CHOICES_PER_QUESTION", "4"))


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
    metrics_port: Optional[int] = (
        int(os.environ["METRICS_PORT"]) if os.getenv("METRICS_PORT") else None
    )


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_study_settings() -> StudySettings:
    """Get study settings."""
    return StudySettings()


def get_grading_settings() -> GradingSettings:
    """Get grading settings."""
    return GradingSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    study: StudySettings = field(default_factory=get_study_settings)
    grading: GradingSettings = field(default_factory=get_grading_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.study.words_per_session < 1:
            raise ValueError("WORDS_PER_SESSION must be positive")

        if self.study.default_quiz_type not in QUIZ_TYPES:
            raise ValueError(f"DEFAULT_QUIZ_TYPE must be one of {', '.join(QUIZ_TYPES)}")

        if self.grading.similarity_threshold <= 0 or self.grading.similarity_threshold > 1:
            raise ValueError("SIMILARITY_THRESHOLD must be in (0, 1]")

        if self.grading.choices_per_question < 2:
            raise ValueError("CHOICES_PER_QUESTION must be at least 2")


# Create global settings instance
settings = Settings()
settings.validate()
