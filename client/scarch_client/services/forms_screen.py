"""
Scarch Client — Forms Screen Service
======================================

What:  The listings and actions behind the forms screen.
How:   Listings prefer the backend's dedicated view routes and fall back, on
       404 only, to the older generic routes:

           documents    /templates/view/documents   → /templates?kind=document → /documents
           templates    /templates/view/templates   → /templates?kind=template → /templates
           ready forms  /templates/view/ready-forms → /form-fills              → /form_fills
"""

from typing import Any, Dict, Optional, Union

from scarch_client.schemas import ApiResponse
from scarch_client.services.base import ApiService
from scarch_client.services.cascade import request_first_found
from scarch_client.services.templates import KIND_DOCUMENT, KIND_TEMPLATE


def _flag_params(**flags: bool) -> Optional[Dict[str, Any]]:
    """Query params holding only the flags that are set, or None."""
    params = {name: True for name, enabled in flags.items() if enabled}
    return params or None


class FormsScreenService(ApiService):

    # ── Listings ──────────────────────────────────────────────────────────

    async def list_documents_view(self) -> ApiResponse:
        return await request_first_found([
            lambda: self.client.get("/templates/view/documents"),
            lambda: self.client.get("/templates", params={"kind": KIND_DOCUMENT}),
            lambda: self.client.get("/documents"),
        ])

    async def list_templates_view(self) -> ApiResponse:
        return await request_first_found([
            lambda: self.client.get("/templates/view/templates"),
            lambda: self.client.get("/templates", params={"kind": KIND_TEMPLATE}),
            lambda: self.client.get("/templates"),
        ])

    async def list_ready_forms_view(self) -> ApiResponse:
        return await request_first_found([
            lambda: self.client.get("/templates/view/ready-forms"),
            lambda: self.client.get("/form-fills"),
            lambda: self.client.get("/form_fills"),
        ])

    # ── Actions ───────────────────────────────────────────────────────────

    async def clone_as_template(self, document_id: Union[int, str]) -> ApiResponse:
        return await self.client.post(f"/templates/{document_id}/clone", body={"kind": KIND_TEMPLATE})

    async def duplicate_document(self, document_id: Union[int, str]) -> ApiResponse:
        return await self.client.post(f"/templates/{document_id}/clone", body={"kind": KIND_DOCUMENT})

    async def duplicate_template(self, template_id: Union[int, str]) -> ApiResponse:
        return await self.client.post(f"/templates/{template_id}/clone", body={"kind": KIND_TEMPLATE})

    async def associate_template(
        self,
        document_id: Union[int, str],
        template_id: Union[int, str],
    ) -> ApiResponse:
        return await self.client.patch(
            f"/templates/{document_id}", body={"applied_template_id": template_id}
        )

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

    async def dissociate_template(self, document_id: Union[int, str]) -> ApiResponse:
        return await self.client.post(f"/templates/documents/{document_id}/dissociate-template")

    async def delete_document(self, document_id: Union[int, str], dissociate: bool = False) -> ApiResponse:
        return await self.client.delete(
            f"/templates/documents/{document_id}",
            params=_flag_params(dissociate=dissociate),
        )

    async def delete_template(self, template_id: Union[int, str], force: bool = False) -> ApiResponse:
        return await self.client.delete(
            f"/templates/{template_id}",
            params=_flag_params(force=force),
        )
