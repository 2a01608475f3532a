"""Legacy documents endpoint: generated documents and field extraction."""

from typing import Union

from scarch_client.schemas import ApiResponse
from scarch_client.services.base import ApiService


class DocumentService(ApiService):

    async def list(self) -> ApiResponse:
        return await self.client.get("/documents")

    async def get(self, document_id: Union[int, str]) -> ApiResponse:
        return await self.client.get(f"/documents/{document_id}")

    async def extract(self, transcription_id: Union[int, str]) -> ApiResponse:
        """Extract structured fields from a transcription into a document."""
        return await self.client.post(f"/documents/{transcription_id}/extract")
