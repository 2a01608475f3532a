"""
Scarch Client — Resource Fallback Cascades
============================================

What:  Ordered fallbacks for resources whose route or payload spelling
       differs between backend deployments.
How:   Each helper takes a request builder and walks a fixed list of
       alternatives, stopping at the first outcome that is not the specific
       "wrong spelling" signal:

           family cascade   base paths      stop on anything but 404
           nested cascade   route suffixes  stop on anything but "family exhausted"
           shape cascade    payload shapes  stop on anything but 400/422
           first-found      whole requests  stop on anything but 404

Who:   Form-fill, OCR-document, work-profile and forms-screen services.

Cascades are stateless: every call restarts from the first candidate, since
operations of one family may live under different spellings on a partially
migrated backend. Only the API prefix is memoized (see `scarch_client.prefix`).
"""

import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from scarch_client.exceptions import (
    ApiError,
    FamilyRouteUnavailableError,
    NotFoundError,
)
from scarch_client.schemas import ApiResponse

logger = logging.getLogger(__name__)

RequestBuilder = Callable[[str], Awaitable[ApiResponse]]


# ══════════════════════════════════════════════════════════════════════════
# Resource families
# ══════════════════════════════════════════════════════════════════════════


class ResourceFamily(BaseModel):
    """A logical backend entity and its candidate base paths, in trial order."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_paths: Tuple[str, ...]

    def path(self, base_path: str, *segments: Any) -> str:
        parts = [str(s).strip("/") for s in segments if s is not None and str(s) != ""]
        if not parts:
            return base_path
        return "/".join([base_path.rstrip("/")] + parts)


FORM_FILLS = ResourceFamily(
    name="form-fills",
    base_paths=(
        "/form-fills",
        "/form_fills",
        "/formfills",
        "/api/form-fills",
        "/api/form_fills",
        "/api/formfills",
    ),
)

WORK_PROFILES = ResourceFamily(
    name="work-profiles",
    base_paths=(
        "/work-profiles",
        "/work_profiles",
        "/api/work-profiles",
        "/api/work_profiles",
    ),
)

OCR_DOCUMENTS = ResourceFamily(
    name="ocr-documents",
    base_paths=(
        "/ocr-documents",
        "/ocr_documents",
        "/api/ocr-documents",
        "/api/ocr_documents",
    ),
)

FILLED_VALUES = ResourceFamily(
    name="filled-values",
    base_paths=("/filled-values", "/api/filled-values"),
)


async def request_with_family_fallback(
    family: ResourceFamily,
    builder: RequestBuilder,
) -> ApiResponse:
    """
    Try `builder(base_path)` for each candidate base path of a family.

    Returns:
        The first successful response.

    Raises:
        Any non-404 error from a candidate, unchanged.
        FamilyRouteUnavailableError when every candidate returned 404.
    """
    tried: List[str] = []
    last_not_found: Optional[NotFoundError] = None

    for base_path in family.base_paths:
        try:
            return await builder(base_path)
        except NotFoundError as e:
            tried.append(e.path or base_path)
            last_not_found = e
            logger.debug("%s: %s not found, trying next candidate", family.name, e.path or base_path)

    logger.warning("%s: no candidate route answered (%d tried)", family.name, len(tried))
    raise FamilyRouteUnavailableError(family.name, tried) from last_not_found


async def request_with_nested_fallback(
    family: ResourceFamily,
    builder: Callable[[str, Optional[str]], Awaitable[ApiResponse]],
    suffixes: Sequence[str],
) -> ApiResponse:
    """
    Family cascade on the resource root, then on each nested suffix.

    `builder(base_path, suffix)` receives `None` as suffix for the root
    attempt. Suffixes are only tried once the root cascade is exhausted.
    """
    tried: List[str] = []
    last_error: Optional[FamilyRouteUnavailableError] = None

    for suffix in (None, *suffixes):
        try:
            return await request_with_family_fallback(
                family, lambda base_path, s=suffix: builder(base_path, s)
            )
        except FamilyRouteUnavailableError as e:
            tried.extend(e.tried_paths)
            last_error = e
            if suffix is not None:
                logger.debug("%s: nested route '%s' unavailable", family.name, suffix)

    raise FamilyRouteUnavailableError(family.name, tried) from last_error.__cause__


# ══════════════════════════════════════════════════════════════════════════
# Payload shapes
# ══════════════════════════════════════════════════════════════════════════


class FieldShapes(BaseModel):
    """
    Alternative field names for one logical value, in trial order.

    Each entry is a set of names; the rendered payload maps every name of
    the set to the value, so a permissive second shape can cover several
    spellings at once.
    """

    model_config = ConfigDict(frozen=True)

    field_sets: Tuple[Tuple[str, ...], ...]
    rejection_statuses: FrozenSet[int] = frozenset({400, 422})

    def payloads(self, value: Any) -> List[Dict[str, Any]]:
        return [{name: value for name in names} for names in self.field_sets]


async def request_with_shape_fallback(
    send: Callable[[Dict[str, Any]], Awaitable[ApiResponse]],
    shapes: FieldShapes,
    value: Any,
) -> ApiResponse:
    """
    Send each payload shape until one is not rejected.

    A 404 (or any other error) is not a shape problem and propagates at
    once, letting an enclosing family cascade move to its next route.

    Raises:
        The last rejection error when every shape was rejected.
    """
    if not shapes.field_sets:
        raise ValueError("FieldShapes needs at least one field set")
    last_rejection: Optional[ApiError] = None

    for payload in shapes.payloads(value):
        try:
            return await send(payload)
        except ApiError as e:
            if e.status_code not in shapes.rejection_statuses:
                raise
            last_rejection = e
            logger.debug(
                "Payload shape %s rejected with %d", sorted(payload), e.status_code
            )

    raise last_rejection


# ══════════════════════════════════════════════════════════════════════════
# Whole-request alternatives
# ══════════════════════════════════════════════════════════════════════════


async def request_first_found(
    attempts: Sequence[Callable[[], Awaitable[ApiResponse]]],
) -> ApiResponse:
    """
    Try alternative requests in order, moving on only after a 404.

    Raises:
        The last NotFoundError when every attempt missed.
    """
    if not attempts:
        raise ValueError("request_first_found needs at least one attempt")
    last_not_found: Optional[NotFoundError] = None
    for attempt in attempts:
        try:
            return await attempt()
        except NotFoundError as e:
            last_not_found = e
    raise last_not_found
