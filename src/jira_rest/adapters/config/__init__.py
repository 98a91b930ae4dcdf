"""
Configuration adapters.
"""

from .environment import DictConfigProvider, EnvironmentConfigProvider, config_from_mapping

__all__ = ["DictConfigProvider", "EnvironmentConfigProvider", "config_from_mapping"]
