"""
Configuration Loader

Handles loading, parsing, and merging configuration from YAML files and
environment variables.

Author: Keep Keeping Project
License: MIT
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from .schema import Config

ENV_PREFIX = "KEEP_KEEPING_"
DEFAULT_CONFIG_PATH = "~/.config/keep_keeping/config.yaml"


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigLoader:
    """
    Configuration loader.
    
    Loads configuration from a YAML file, merges environment variables
    and validates the result.
    """
    
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.
        
        Args:
            config_path: Path to the configuration file. If None, uses
                KEEP_KEEPING_CONFIG or the default location.
        """
        # Load environment variables from .env if present
        load_dotenv()
        
        self.config_path = os.path.expanduser(
            config_path or _env("CONFIG") or DEFAULT_CONFIG_PATH
        )
        self._config: Optional[Config] = None
    
    def load(self) -> Config:
        """
        Load and validate configuration.
        
        Returns:
            Validated Config object
            
        Raises:
            ValueError: If YAML parsing or validation fails
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)
        
        self._config = Config(**config_data)
        return self._config
    
    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.
        
        Returns:
            Dictionary with configuration data (empty if the file is absent)
        """
        config_file = Path(self.config_path)
        
        if not config_file.exists():
            return {}
        
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config: {e}")
        
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_file}")
        return data
    
    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.
        
        Environment variables override config file values.
        Naming convention: KEEP_KEEPING_<KEY> (e.g. KEEP_KEEPING_MAX_WORKERS)
        
        Args:
            config_data: Configuration dictionary from file
            
        Returns:
            Merged configuration dictionary
        """
        # App settings
        if _env("LOG_LEVEL"):
            config_data.setdefault("app", {})["log_level"] = _env("LOG_LEVEL").upper()
        if _env("LOG_FILE"):
            config_data.setdefault("app", {})["log_to_file"] = True
            config_data["app"]["log_file_path"] = _env("LOG_FILE")
        if _env("JSON_LOGS"):
            config_data.setdefault("app", {})["json_logs"] = _env_bool(_env("JSON_LOGS"))
        
        # Sync settings
        if _env("MAX_WORKERS"):
            config_data.setdefault("sync", {})["max_workers"] = int(_env("MAX_WORKERS"))
        if _env("BUNDLE_SUFFIXES"):
            config_data.setdefault("sync", {})["bundle_suffixes"] = _env("BUNDLE_SUFFIXES")
        if _env("CREATE_MISSING_ROOT"):
            config_data.setdefault("sync", {})["create_missing_root"] = _env_bool(_env("CREATE_MISSING_ROOT"))
        if _env("DRY_RUN"):
            config_data.setdefault("sync", {})["dry_run"] = _env_bool(_env("DRY_RUN"))
        
        return config_data
    
    def save(self, config: Config, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.
        
        Args:
            config: Config object to save
            path: Path to save to (uses loader path if None)
        """
        save_path = Path(path or self.config_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        
        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
    
    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Convenience function to load configuration.
    
    Args:
        config_path: Optional path to config file
        
    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load()
