"""Configuration package for the mock interview service."""
from .app_config import AppConfig, LlmRoute, load_config, load_route, resolve_route
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_config",
    "load_route",
    "resolve_route",
    "Settings",
    "settings",
]
