"""
API middleware.
"""

from scribexx.api.middleware.request_id import RequestIdMiddleware

__all__ = ["RequestIdMiddleware"]
