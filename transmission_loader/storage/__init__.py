"""
Storage Layer.

This package handles reading the YAML configuration file.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
