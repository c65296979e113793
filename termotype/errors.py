from __future__ import annotations


class ConfigurationError(ValueError):
    """A test cannot be configured: unusable word source or invalid mode."""
