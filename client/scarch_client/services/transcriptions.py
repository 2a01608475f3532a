"""Transcriptions: text produced from recorded audio, editable and exportable."""

from typing import Any, Dict, Optional, Union

from scarch_client.schemas import ApiResponse
from scarch_client.services.base import ApiService


class TranscriptionService(ApiService):

    async def list(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self.client.get("/transcriptions", params=params)

    async def get(self, transcription_id: Union[int, str]) -> ApiResponse:
        return await self.client.get(f"/transcriptions/{transcription_id}")

    async def create(self, title: Optional[str] = None, text: Optional[str] = None) -> ApiResponse:
        # Both spellings are sent; deployments read one or the other.
        return await self.client.post(
            "/transcriptions",
            body={
                "title": title,
                "transcription_text": text or "",
                "text": text or "",
            },
        )

    async def validate(self, transcription_id: Union[int, str]) -> ApiResponse:
        return await self.client.post(f"/transcriptions/{transcription_id}/validate")

    async def complete(self, transcription_id: Union[int, str], document_name: str) -> ApiResponse:
        return await self.client.post(
            f"/transcriptions/{transcription_id}/complete",
            body={"document_name": document_name},
        )

    async def update_text(self, transcription_id: Union[int, str], text: str) -> ApiResponse:
        return await self.client.patch(
            f"/transcriptions/{transcription_id}",
            body={"transcription_text": text},
        )

    async def rename(self, transcription_id: Union[int, str], title: Optional[str]) -> ApiResponse:
        return await self.client.patch(
            f"/transcriptions/{transcription_id}",
            body={"document_name": str(title or "").strip()},
        )

    async def delete(self, transcription_id: Union[int, str]) -> ApiResponse:
        return await self.client.delete(f"/transcriptions/{transcription_id}")
