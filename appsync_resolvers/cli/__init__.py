"""
Command line interface for appsync_resolvers.
"""

from .main import main, run

__all__ = ["main", "run"]
