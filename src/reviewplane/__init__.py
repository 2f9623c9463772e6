"""ReviewPlane - change blocks, position mapping, navigation and AI walkthroughs for code review."""

__version__ = "0.1.0"
