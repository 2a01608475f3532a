"""Work profiles: reusable identity / company data used to prefill forms."""

from typing import Any, Dict, Union

from scarch_client.schemas import ApiResponse
from scarch_client.services.base import ApiService
from scarch_client.services.cascade import WORK_PROFILES


class WorkProfileService(ApiService):

    async def list(self) -> ApiResponse:
        return await self._family_request(WORK_PROFILES, "GET")

    async def get(self, profile_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(WORK_PROFILES, "GET", profile_id)

    async def create(self, payload: Dict[str, Any]) -> ApiResponse:
        return await self._family_request(WORK_PROFILES, "POST", body=payload)

    async def update(self, profile_id: Union[int, str], payload: Dict[str, Any]) -> ApiResponse:
        return await self._family_request(WORK_PROFILES, "PATCH", profile_id, body=payload)

    async def delete(self, profile_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(WORK_PROFILES, "DELETE", profile_id)
