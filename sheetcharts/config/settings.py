"""
Configuration settings for the spreadsheet chart analyzer
Environment variables and application configuration
"""

import os
from typing import List
import logging

logger = logging.getLogger(__name__)


class Settings:
    """Application settings with environment variable support"""

    # Server Configuration
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()

    # Analysis Limits
    MAX_DATASET_ROWS: int = int(os.getenv("MAX_DATASET_ROWS", "50000"))
    CHART_VARIANT_COUNT: int = int(os.getenv("CHART_VARIANT_COUNT", "4"))
    SLOW_ANALYSIS_MS: float = float(os.getenv("SLOW_ANALYSIS_MS", "1000"))

    # Security Configuration
    ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    ]

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    ENABLE_FILE_LOGGING: bool = os.getenv("ENABLE_FILE_LOGGING", "False").lower() == "true"
    LOG_FILE_PATH: str = os.getenv("LOG_FILE_PATH", "logs/app.log")
    ENABLE_DETAILED_LOGGING: bool = os.getenv("ENABLE_DETAILED_LOGGING", "False").lower() == "true"

    def __init__(self):
        """Initialize settings and validate configuration"""
        self._validate_settings()
        self._log_configuration()

    def _validate_settings(self):
        """Validate critical configuration settings"""

        # Validate port range
        if not (1 <= self.PORT <= 65535):
            raise ValueError(f"Invalid port number: {self.PORT}")

        if self.MAX_DATASET_ROWS < 1:
            raise ValueError(f"MAX_DATASET_ROWS must be positive, got {self.MAX_DATASET_ROWS}")

        # Only four chart variants exist (bar, line, pie, doughnut)
        if not (1 <= self.CHART_VARIANT_COUNT <= 4):
            raise ValueError(f"CHART_VARIANT_COUNT must be between 1 and 4, got {self.CHART_VARIANT_COUNT}")

        if self.SLOW_ANALYSIS_MS <= 0:
            raise ValueError(f"SLOW_ANALYSIS_MS must be positive, got {self.SLOW_ANALYSIS_MS}")

        if self.LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logger.warning(f"⚠️ Unknown LOG_LEVEL '{self.LOG_LEVEL}' - falling back to INFO")
            self.LOG_LEVEL = "INFO"

        if "*" in self.ALLOWED_ORIGINS and self.ENVIRONMENT == "production":
            logger.warning("⚠️ Wildcard CORS origin configured in production")

    def _log_configuration(self):
        """Log current configuration for debugging"""
        if self.DEBUG:
            logger.info("📋 Current Configuration:")
            logger.info(f"   Environment: {self.ENVIRONMENT}")
            logger.info(f"   Max dataset rows: {self.MAX_DATASET_ROWS}")
            logger.info(f"   Chart variants per upload: {self.CHART_VARIANT_COUNT}")
            logger.info(f"   File logging: {self.ENABLE_FILE_LOGGING}")
            logger.info(f"   Debug Mode: {self.DEBUG}")

    def get_logging_config(self) -> dict:
        """Get logging configuration"""
        return {
            "level": self.LOG_LEVEL,
            "format": self.LOG_FORMAT,
            "file_logging": self.ENABLE_FILE_LOGGING,
            "file_path": self.LOG_FILE_PATH,
            "detailed": self.ENABLE_DETAILED_LOGGING
        }


# Global settings instance
settings = Settings()


# Environment-specific configurations
class DevelopmentSettings(Settings):
    """Development environment settings"""
    DEBUG = True
    LOG_LEVEL = "DEBUG"
    ENABLE_DETAILED_LOGGING = True


class ProductionSettings(Settings):
    """Production environment settings"""
    DEBUG = False
    LOG_LEVEL = "INFO"
    ENABLE_FILE_LOGGING = True


class TestingSettings(Settings):
    """Testing environment settings"""
    ENVIRONMENT = "testing"
    ENABLE_FILE_LOGGING = False
    MAX_DATASET_ROWS = 1000


def get_settings():
    """Get settings based on environment"""
    env = os.getenv("ENVIRONMENT", "development").lower()

    if env == "production":
        return ProductionSettings()
    elif env == "testing":
        return TestingSettings()
    else:
        return DevelopmentSettings()
