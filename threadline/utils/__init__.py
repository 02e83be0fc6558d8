"""
Utility functions
"""

from threadline.utils.timestamps import utc_now

__all__ = [
    "utc_now",
]
