"""Config module exports."""

from reviewplane.config.loader import load_config
from reviewplane.config.models import (
    CommentsConfig,
    LoggingConfig,
    NavigationConfig,
    ReviewDiffConfig,
    ReviewerConfig,
    ReviewPlaneConfig,
)

__all__ = [
    "load_config",
    "ReviewPlaneConfig",
    "LoggingConfig",
    "NavigationConfig",
    "ReviewerConfig",
    "ReviewDiffConfig",
    "CommentsConfig",
]
