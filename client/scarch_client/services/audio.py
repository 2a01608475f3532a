"""
Scarch Client — Audio Service
===============================

What:  Uploads recordings and builds playback URLs for them.
How:   Uploads are multipart with the long upload timeout. Playback URLs are
       absolute, use the memoized API prefix and carry the token as a query
       parameter, since players fetch them outside this client.
"""

from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from scarch_client.config import settings
from scarch_client.schemas import ApiResponse, UploadPart
from scarch_client.services.base import ApiService
from scarch_client.services.uploads import prepare_parts


class AudioService(ApiService):

    async def upload(
        self,
        recording: Union[str, UploadPart],
        fields: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """
        Upload one recording.

        Args:
            recording: Local file path or ready-made part, sent as `audio`.
            fields:    Extra form fields (e.g. transcription_id, language).
        """
        parts = await prepare_parts(
            [recording], field="audio", default_type="audio/m4a", fallback_name="recording"
        )
        return await self.client.post(
            "/audio/upload",
            form=fields or {},
            files=parts,
            timeout=settings.upload_timeout,
        )

    async def list_by_transcription(self, transcription_id: Union[int, str]) -> ApiResponse:
        return await self.client.get(f"/audio/transcription/{transcription_id}")

    async def file_url(self, filename: str) -> str:
        token = await self.client.request_interceptor.read_token()
        url = self.client.absolute_url(f"/audio/file/{quote(filename)}")
        return f"{url}?token={quote(token or '')}"
