"""
Application Configuration Module

This module defines all configuration settings for the Build Tracker API.
Settings are loaded from environment variables (via .env file) using Pydantic.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application-wide configuration settings.

    All settings can be overridden via environment variables.
    The .env file is automatically loaded if present.
    List values are given as JSON arrays, e.g. LEAD_ROLES='["Builder"]'.
    """
    # === Application Metadata ===
    PROJECT_NAME: str = "Build Tracker API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"  # API version prefix for all routes

    # === Local Database (team members, requestors, EDC systems) ===
    DATABASE_URL: Optional[str] = None  # e.g., "sqlite:///./build_tracker.db"

    # === Remote Sheet Store (tasks) ===
    SHEET_API_URL: str = "https://api.smartsheet.com/2.0"
    SHEET_ID: str = ""
    # Bearer token; leave empty when a forwarding proxy injects credentials
    SHEET_API_TOKEN: Optional[str] = None
    # When set, every call is wrapped as {path, method, body} and POSTed here
    SHEET_PROXY_URL: Optional[str] = None
    # Seconds; None keeps the HTTP client's own default
    SHEET_TIMEOUT: Optional[float] = None

    # === Column Scheme ===
    # Name of a built-in scheme, or a JSON file that overrides it
    COLUMN_SCHEME: str = "requests-v2"
    COLUMN_SCHEME_PATH: Optional[str] = None

    # === Quality Metrics Sheet ===
    # Second sheet on the same store; empty disables the metrics endpoints
    METRICS_SHEET_ID: str = ""
    METRICS_COLUMN_SCHEME: str = "metrics-v1"
    METRICS_COLUMN_SCHEME_PATH: Optional[str] = None

    # === Allocation ===
    # Roles are matched by exact string comparison
    LEAD_ROLES: List[str] = ["Builder"]
    SUPPORT_ROLES: List[str] = ["Builder"]
    DEFAULT_EDC_SYSTEMS: List[str] = [
        "Rave", "Viedoc", "Veeva", "Medrio", "iMednet", "OpenClinica",
    ]

    # === Logging & Notifications ===
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    NOTIFICATION_BUFFER: int = 50  # Recent user-facing messages kept in memory

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",        # Load environment variables from .env file
        case_sensitive=True,    # Environment variable names must match case
        extra="ignore"          # Ignore extra environment variables not defined here
    )

# Create a single global settings instance
# This is imported throughout the application for configuration access
settings = Settings()
