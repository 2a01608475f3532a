"""
Scarch Client — Interceptor Package
=====================================

What:  Cross-cutting steps applied to every transport exchange.

Interceptor Chain (order matters!):
    call → [Request: prefix + token] → Transport → [Response: memoize / 404 retry / 401]
                                                        │
                                  retry with new prefix ┘ (back through the whole chain)

    Every exchange is also logged with the logical call's correlation id.
"""

from scarch_client.interceptors.request import RequestInterceptor
from scarch_client.interceptors.response import ResponseInterceptor

__all__ = ["RequestInterceptor", "ResponseInterceptor"]
