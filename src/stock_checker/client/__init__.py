"""
Remote data source.

The data access layer only depends on the three ``list_*`` methods, so any
object providing them can stand in for JQuantsClient.
"""

from .jquants import JQuantsClient

__all__ = [
    "JQuantsClient",
]
