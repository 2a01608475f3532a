"""
Scarch Client — OCR Document Service
======================================

What:  OCR documents: uploaded pages (images or PDF) and their extracted text.
How:   Every call runs the ocr-documents family cascade. Text and title
       updates also cascade through payload shapes, because deployments
       disagree on the field names they accept.

Shape cascades:
    title      title             → title + name + document_name        (on 400)
    full text  full_text         → every known text spelling           (on 400/422)
    page text  extracted_text    → extracted_text + text + page_text
                                   + full_text                         (on 400/422)
"""

import logging
import time
from typing import Any, Dict, Optional, Sequence, Union

from scarch_client.config import settings
from scarch_client.schemas import ApiResponse, UploadPart
from scarch_client.services.base import ApiService
from scarch_client.services.cascade import (
    OCR_DOCUMENTS,
    FieldShapes,
    request_with_family_fallback,
    request_with_shape_fallback,
)
from scarch_client.services.uploads import prepare_parts

logger = logging.getLogger(__name__)

TITLE_SHAPES = FieldShapes(
    field_sets=(
        ("title",),
        ("title", "name", "document_name"),
    ),
    rejection_statuses=frozenset({400}),
)

TEXT_SHAPES = FieldShapes(
    field_sets=(
        ("full_text",),
        (
            "text",
            "full_text",
            "fullText",
            "extracted_text",
            "extractedText",
            "ocr_text",
            "ocrText",
        ),
    ),
)

PAGE_TEXT_SHAPES = FieldShapes(
    field_sets=(
        ("extracted_text",),
        ("extracted_text", "text", "page_text", "full_text"),
    ),
)


class OcrDocumentService(ApiService):

    async def create(
        self,
        title: Optional[str],
        files: Sequence[Union[str, UploadPart]] = (),
    ) -> ApiResponse:
        """
        Upload pages as a new OCR document.

        Args:
            title: Document title; defaults to "OCR <epoch ms>".
            files: Local paths or ready-made parts, sent as `images`.
        """
        parts = await prepare_parts(files, field="images", fallback_name="page-{index}")
        form = {"title": title or f"OCR {int(time.time() * 1000)}"}
        return await self._family_request(
            OCR_DOCUMENTS,
            "POST",
            form=form,
            files=parts,
            timeout=settings.ocr_upload_timeout,
        )

    async def list(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self._family_request(OCR_DOCUMENTS, "GET", params=params)

    async def get(self, document_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(OCR_DOCUMENTS, "GET", document_id)

    async def _patch_with_shapes(self, shapes: FieldShapes, value: Any, *segments: Any) -> ApiResponse:
        """Family cascade locates the route; shape cascade runs on each candidate."""
        return await request_with_family_fallback(
            OCR_DOCUMENTS,
            lambda base_path: request_with_shape_fallback(
                lambda payload: self.client.patch(
                    OCR_DOCUMENTS.path(base_path, *segments),
                    body=payload,
                    prefix_fallback=False,
                ),
                shapes,
                value,
            ),
        )

    async def update_title(self, document_id: Union[int, str], title: str) -> ApiResponse:
        return await self._patch_with_shapes(TITLE_SHAPES, title, document_id)

    async def update_text(self, document_id: Union[int, str], text: Optional[str]) -> ApiResponse:
        return await self._patch_with_shapes(TEXT_SHAPES, text or "", document_id)

    async def update_page_text(
        self,
        document_id: Union[int, str],
        page_id: Union[int, str],
        text: Optional[str],
    ) -> ApiResponse:
        return await self._patch_with_shapes(
            PAGE_TEXT_SHAPES, text or "", document_id, "pages", page_id
        )

    async def clear_page_text(self, document_id: Union[int, str], page_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(OCR_DOCUMENTS, "DELETE", document_id, "pages", page_id, "text")

    async def delete(self, document_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(OCR_DOCUMENTS, "DELETE", document_id)
