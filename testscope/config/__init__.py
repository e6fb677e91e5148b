"""Configuration management for testscope."""

from .loader import ConfigLoader, ConfigurationError, load_config
from .models import NamingConfig, PatternConfig, RunnerConfig, TestScopeConfig

__all__ = [
    "TestScopeConfig",
    "NamingConfig",
    "PatternConfig",
    "RunnerConfig",
    "ConfigLoader",
    "ConfigurationError",
    "load_config",
]
