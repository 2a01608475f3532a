"""
Scarch Client — Template Service
==================================

What:  Templates and documents (both live under `/templates`, told apart by
       `kind`), their fields, calibrations, AI enrichment and page images.
Who:   Import, editor and fill screens.

Page images:
    Viewers fetch page images directly, so this service hands out absolute
    URLs with the token in the query. `page_image_url_candidates()` lists
    every location an image may be served from; cache files come first
    since the rendering endpoint can stall on large multi-page uploads.
"""

import logging
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import quote

from scarch_client.config import settings
from scarch_client.schemas import ApiResponse, UploadPart
from scarch_client.services.base import ApiService
from scarch_client.services.uploads import prepare_parts

logger = logging.getLogger(__name__)

KIND_DOCUMENT = "document"
KIND_TEMPLATE = "template"


class TemplateService(ApiService):

    # ── Listing & CRUD ────────────────────────────────────────────────────

    async def list(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self.client.get("/templates", params=params)

    async def list_by_kind(self, kind: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self.client.get("/templates", params={"kind": kind, **(params or {})})

    async def list_documents(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self.list_by_kind(KIND_DOCUMENT, params)

    async def list_templates(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self.list_by_kind(KIND_TEMPLATE, params)

    async def get(self, template_id: Union[int, str]) -> ApiResponse:
        return await self.client.get(f"/templates/{template_id}")

    async def update(self, template_id: Union[int, str], payload: Dict[str, Any]) -> ApiResponse:
        return await self.client.patch(f"/templates/{template_id}", body=payload)

    async def delete(self, template_id: Union[int, str]) -> ApiResponse:
        return await self.client.delete(f"/templates/{template_id}")

    async def clone(self, template_id: Union[int, str], payload: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self.client.post(f"/templates/{template_id}/clone", body=payload)

    async def apply_template(
        self,
        document_id: Union[int, str],
        template_id: Union[int, str],
        mode: str = "clone",
    ) -> ApiResponse:
        return await self.client.post(
            f"/templates/{document_id}/apply-template",
            body={"template_id": template_id, "mode": mode},
        )

    async def clear_applied_template(self, document_id: Union[int, str]) -> ApiResponse:
        return await self.client.patch(
            f"/templates/{document_id}", body={"applied_template_id": None}
        )

    # ── Uploads ───────────────────────────────────────────────────────────

    async def upload(
        self,
        file: Union[str, UploadPart],
        kind: str = KIND_DOCUMENT,
        name: Optional[str] = None,
    ) -> ApiResponse:
        """Upload a single-file template or document (image or PDF)."""
        parts = await prepare_parts([file], field="file", fallback_name="document")
        form: Dict[str, Any] = {"kind": kind or KIND_DOCUMENT}
        if name and name.strip():
            form["name"] = name.strip()
            form["document_name"] = name.strip()
        return await self.client.post(
            "/templates/upload",
            form=form,
            files=parts,
            timeout=settings.template_upload_timeout,
        )

    async def upload_multi(
        self,
        files: Sequence[Union[str, UploadPart]],
        kind: str = KIND_DOCUMENT,
        name: Optional[str] = None,
    ) -> ApiResponse:
        """
        Upload several page images as one template or document.

        At most `settings.max_upload_files` pages are sent; the rest are
        dropped with a warning.
        """
        if len(files) > settings.max_upload_files:
            logger.warning(
                "upload_multi: %d files given, sending the first %d",
                len(files),
                settings.max_upload_files,
            )
        parts = await prepare_parts(
            files,
            field="files",
            fallback_name="page-{index}.jpg",
            limit=settings.max_upload_files,
        )
        form: Dict[str, Any] = {"kind": kind or KIND_DOCUMENT}
        if name and name.strip():
            form["name"] = name.strip()
        return await self.client.post(
            "/templates/upload-multi",
            form=form,
            files=parts,
            timeout=settings.upload_timeout,
        )

    # ── Calibration ───────────────────────────────────────────────────────

    async def save_calibration(self, template_id: Union[int, str], payload: Dict[str, Any]) -> ApiResponse:
        return await self.client.post(f"/templates/{template_id}/calibration", body=payload)

    async def get_calibrations(self, template_id: Union[int, str]) -> ApiResponse:
        return await self.client.get(f"/templates/{template_id}/calibrations")

    # ── Fields ────────────────────────────────────────────────────────────

    async def create_field(self, template_id: Union[int, str], payload: Dict[str, Any]) -> ApiResponse:
        return await self.client.post(f"/templates/{template_id}/fields", body=payload)

    async def update_field(
        self,
        template_id: Union[int, str],
        field_id: Union[int, str],
        payload: Dict[str, Any],
    ) -> ApiResponse:
        return await self.client.patch(f"/templates/{template_id}/fields/{field_id}", body=payload)

    async def delete_field(self, template_id: Union[int, str], field_id: Union[int, str]) -> ApiResponse:
        return await self.client.delete(f"/templates/{template_id}/fields/{field_id}")

    # ── AI ────────────────────────────────────────────────────────────────

    async def enrich(self, template_id: Union[int, str]) -> ApiResponse:
        return await self.client.post(f"/templates/{template_id}/enrich")

    async def ai_prefill(self, template_id: Union[int, str], page_number: int) -> ApiResponse:
        return await self.client.post(
            f"/templates/{template_id}/ai-prefill",
            body={"page_number": page_number},
            timeout=settings.ai_prefill_timeout,
        )

    # ── Page images ───────────────────────────────────────────────────────

    async def page_image_url(self, template_id: Union[int, str], page_number: int) -> str:
        token = await self.client.request_interceptor.read_token()
        url = self.client.absolute_url(f"/templates/{template_id}/page/{page_number}/image")
        return f"{url}?token={quote(token or '')}"

    async def page_image_url_candidates(
        self,
        template_id: Union[int, str],
        page_number: int,
        file_filename: str = "",
    ) -> List[str]:
        """
        Every URL a page image may be served from, deduplicated, in order:

            1. cache files named after the uploaded file
            2. the cache file named after the template id
            3. the rendering endpoint

        Each path is offered both bare and under the memoized prefix.
        """
        token = await self.client.request_interceptor.read_token()
        token_suffix = f"?token={quote(token, safe='')}" if token else ""

        candidate_names: List[str] = []
        stem = PurePosixPath(file_filename).stem if "." in file_filename else file_filename
        if stem:
            candidate_names.append(f"{stem}_page_{page_number}.png")
            candidate_names.append(f"{stem}_page_{page_number}-1.png")
            candidate_names.append(f"{stem}_page_{page_number}-{page_number}.png")
        candidate_names.append(f"{template_id}_page-{page_number}.png")

        paths: List[str] = []
        for name in candidate_names:
            paths.append(f"/uploads/templates/cache/{name}")
            paths.append(f"/templates/cache/{name}")
        paths.append(f"/templates/{template_id}/page/{page_number}/image")

        urls: List[str] = []
        for path in paths:
            for with_prefix in (False, True):
                url = f"{self.client.absolute_url(path, with_prefix=with_prefix)}{token_suffix}"
                if url not in urls:
                    urls.append(url)
        return urls
