"""
Keep Keeping Configuration Module

Loads the YAML configuration file, applies environment variable
overrides and validates the result.

Author: Keep Keeping Project
License: MIT
"""

from .schema import AppConfig, Config, LogLevel, SyncSettings

__all__ = ['AppConfig', 'Config', 'LogLevel', 'SyncSettings']
