"""Core enums package.

Usage:
    from routebinder.core.enums import Environment
"""

from routebinder.core.enums.environment import Environment

__all__ = ["Environment"]
