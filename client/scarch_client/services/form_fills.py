"""
Scarch Client — Form Fill Service
===================================

What:  Form fills: a document template filled from a transcription or OCR
       source, plus per-field overrides and filled values.
How:   Every call runs the form-fills family cascade. Updates additionally
       fall back to nested `fill-data` / `fill_data` / `data` routes, and
       filled values are looked up under their own family first.
"""

import logging
from typing import Any, Dict, Optional, Union

from scarch_client.exceptions import FamilyRouteUnavailableError
from scarch_client.schemas import ApiResponse
from scarch_client.services.base import ApiService
from scarch_client.services.cascade import (
    FILLED_VALUES,
    FORM_FILLS,
    request_with_nested_fallback,
)

logger = logging.getLogger(__name__)

# Older deployments accept the fill payload only on a nested route.
UPDATE_ROUTE_SUFFIXES = ("fill-data", "fill_data", "data")

DEFAULT_SOURCE_TYPE = "transcription"


class FormFillService(ApiService):

    async def create(
        self,
        document_id: Union[int, str],
        source_type: Union[int, str, None] = None,
        source_id: Union[int, str, None] = None,
    ) -> ApiResponse:
        """
        Create a form fill for a document from a source.

        Also accepts the legacy `create(document_id, transcription_id)` form:
        a second argument that is not a source-type name is taken as the id
        of a transcription.
        """
        if not (isinstance(source_type, str) and source_type.strip()):
            if source_id is None:
                source_id = source_type
            source_type = DEFAULT_SOURCE_TYPE
        payload = {
            "document_id": document_id,
            "source_type": source_type,
            "source_id": source_id,
        }
        return await self._family_request(FORM_FILLS, "POST", body=payload)

    async def list(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return await self._family_request(FORM_FILLS, "GET", params=params)

    async def get(self, form_fill_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(FORM_FILLS, "GET", form_fill_id)

    async def update(self, form_fill_id: Union[int, str], payload: Dict[str, Any]) -> ApiResponse:
        """
        PATCH the form fill at its root, or at the first nested update route
        that exists.

        Raises:
            FamilyRouteUnavailableError: neither the root nor any nested
                route exists under any family spelling.
        """
        return await request_with_nested_fallback(
            FORM_FILLS,
            lambda base_path, suffix: self.client.patch(
                FORM_FILLS.path(base_path, form_fill_id, suffix),
                body=payload,
                prefix_fallback=False,
            ),
            UPDATE_ROUTE_SUFFIXES,
        )

    async def delete(self, form_fill_id: Union[int, str]) -> ApiResponse:
        return await self._family_request(FORM_FILLS, "DELETE", form_fill_id)

    async def patch_field_override(
        self,
        form_fill_id: Union[int, str],
        template_field_id: Union[int, str],
        payload: Dict[str, Any],
    ) -> ApiResponse:
        return await self._family_request(
            FORM_FILLS, "PATCH", form_fill_id, "fields", template_field_id, body=payload
        )

    async def delete_field_override(
        self,
        form_fill_id: Union[int, str],
        template_field_id: Union[int, str],
    ) -> ApiResponse:
        return await self._family_request(
            FORM_FILLS, "DELETE", form_fill_id, "fields", template_field_id
        )

    async def update_filled_value(self, value_id: Union[int, str], value: Any) -> ApiResponse:
        """
        Set one filled value.

        Tries the standalone filled-values routes, then the values
        sub-collection of the form-fills family.
        """
        payload = {"value": value}
        try:
            return await self._family_request(FILLED_VALUES, "PATCH", value_id, body=payload)
        except FamilyRouteUnavailableError:
            logger.debug("filled-values routes unavailable, using form-fill values route")
        return await self._family_request(FORM_FILLS, "PATCH", "values", value_id, body=payload)
