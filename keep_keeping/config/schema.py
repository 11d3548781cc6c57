"""
Configuration Schema and Models

Defines Pydantic models for the configuration schema, providing validation,
default values, and type checking for all configuration options.

Author: Keep Keeping Project
License: MIT
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseModel):
    """Logging and general application settings."""
    
    model_config = ConfigDict(use_enum_values=True, validate_default=True)
    
    log_level: LogLevel = Field(
        default=LogLevel.WARNING,
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: Optional[str] = Field(
        default=None,
        description="Log file path (required when log_to_file is enabled)"
    )
    log_rotation_size: int = Field(
        default=10485760,  # 10MB
        description="Log file size before rotation (bytes)"
    )
    log_retention_count: int = Field(
        default=5,
        description="Number of rotated log files to keep"
    )
    json_logs: bool = Field(
        default=False,
        description="Emit logs as JSON"
    )
    
    @model_validator(mode="after")
    def validate_log_file(self):
        """File logging needs a destination."""
        if self.log_to_file and not self.log_file_path:
            raise ValueError("log_file_path must be set when log_to_file is enabled")
        return self


class SyncSettings(BaseModel):
    """Synchronization engine settings."""
    
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads for top-level entries (1 = sequential)"
    )
    bundle_suffixes: List[str] = Field(
        default=[".app"],
        description="Directory suffixes synchronized as a single unit"
    )
    bundle_marker: Optional[str] = Field(
        default="Contents",
        description="Sub-directory a bundle must contain (None = suffix only)"
    )
    race_retries: int = Field(
        default=1,
        ge=0,
        description="Retries when a destination changes kind mid-sync"
    )
    create_missing_root: bool = Field(
        default=False,
        description="Create a missing root from the other side instead of failing"
    )
    dry_run: bool = Field(
        default=False,
        description="Report decisions without modifying anything"
    )
    
    @field_validator("bundle_suffixes", mode="before")
    @classmethod
    def normalize_suffixes(cls, v):
        """Normalize suffixes to lowercase with a leading dot."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            return ["." + s.strip().lower().lstrip('.') for s in v if s.strip().lstrip('.')]
        return v


class Config(BaseModel):
    """
    Root configuration model for Keep Keeping.
    
    Loaded from a YAML file and overridden by environment variables.
    """
    
    model_config = ConfigDict(validate_assignment=True)
    
    app: AppConfig = Field(default_factory=AppConfig)
    sync: SyncSettings = Field(default_factory=SyncSettings)
