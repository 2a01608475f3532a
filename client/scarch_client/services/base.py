"""
Scarch Client — Service Base
==============================

What:  Shared plumbing for the call-site services: the ApiClient handle and
       the family-cascade request helper.
"""

from typing import Any

from scarch_client.client import ApiClient
from scarch_client.schemas import ApiResponse
from scarch_client.services.cascade import ResourceFamily, request_with_family_fallback


class ApiService:
    """Base class for services that wrap one ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def _family_request(
        self,
        family: ResourceFamily,
        method: str,
        *segments: Any,
        **kwargs: Any,
    ) -> ApiResponse:
        """
        `method` on `<base>/<segments...>` for each base path of the family.

        Attempts skip prefix retries: the family's own candidate list
        already covers the prefixed spellings.
        """
        return await request_with_family_fallback(
            family,
            lambda base_path: self.client.request(
                method,
                family.path(base_path, *segments),
                prefix_fallback=False,
                **kwargs,
            ),
        )
