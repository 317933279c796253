"""Version bump and release automation for multi-module source trees."""

__version__ = "0.1.0"
