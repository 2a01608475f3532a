"""
Scarch Client — Call-Site Service Tests
=========================================

What:  The typed wrappers screens call, over a scripted transport.

What we test:
    ✅ Form fills: create payload, legacy create, nested update, filled values
    ✅ OCR documents: title/text/page-text shape fallbacks, multipart create
    ✅ Work profiles: family cascade order, FamilyRouteUnavailableError
    ✅ Auth: token stored on login, missing token rejected, logout
    ✅ Templates / audio: token-bearing URLs, multi-upload cap
    ✅ Forms screen: listing fallbacks
"""

import pytest
from unittest.mock import patch

from conftest import response
from scarch_client.config import settings
from scarch_client.exceptions import (
    BadRequestError,
    FamilyRouteUnavailableError,
    ScarchClientError,
    UnprocessableEntityError,
)
from scarch_client.prefix import ApiPrefix
from scarch_client.schemas import UploadPart
from scarch_client.services import (
    AudioService,
    AuthService,
    FormFillService,
    FormsScreenService,
    OcrDocumentService,
    TemplateService,
    TranscriptionService,
    WorkProfileService,
)


def body_of(call):
    return call[3].body


class TestFormFillService:

    @pytest.mark.asyncio
    async def test_create_payload(self, api_client, transport):
        """Create sends document, source type and source id."""
        transport.route("POST", "/form-fills", 201, {"id": 1})

        await FormFillService(api_client).create(10, "ocr_document", 4)

        assert body_of(transport.calls[0]) == {
            "document_id": 10,
            "source_type": "ocr_document",
            "source_id": 4,
        }

    @pytest.mark.asyncio
    async def test_legacy_create_means_transcription(self, api_client, transport):
        """A numeric second argument is read as a transcription id."""
        transport.route("POST", "/form-fills", 201, {"id": 1})

        await FormFillService(api_client).create(10, 33)

        assert body_of(transport.calls[0]) == {
            "document_id": 10,
            "source_type": "transcription",
            "source_id": 33,
        }

    @pytest.mark.asyncio
    async def test_update_falls_back_to_nested_route(self, api_client, transport):
        """Nested update routes are tried after every root spelling misses."""
        transport.route("PATCH", "/form_fills/8/fill-data", 200, {"id": 8})

        result = await FormFillService(api_client).update(8, {"data": {"name": "A"}})

        assert result.status_code == 200
        # root under all 6 spellings, then fill-data under the first two
        assert len(transport.calls) == 8
        assert transport.paths[-1] == "/form_fills/8/fill-data"
        assert all(body_of(c) == {"data": {"name": "A"}} for c in transport.calls)

    @pytest.mark.asyncio
    async def test_update_filled_value_standalone_route(self, api_client, transport):
        """Filled values use their own routes first."""
        transport.route("PATCH", "/api/filled-values/3", 200, {"id": 3})

        await FormFillService(api_client).update_filled_value(3, "Paris")

        assert transport.paths == ["/filled-values/3", "/api/filled-values/3"]
        assert body_of(transport.calls[-1]) == {"value": "Paris"}

    @pytest.mark.asyncio
    async def test_update_filled_value_form_fill_route(self, api_client, transport):
        """Filled values fall back to the form-fill values route."""
        transport.route("PATCH", "/formfills/values/3", 200, {"id": 3})

        await FormFillService(api_client).update_filled_value(3, "Paris")

        assert transport.paths == [
            "/filled-values/3",
            "/api/filled-values/3",
            "/form-fills/values/3",
            "/form_fills/values/3",
            "/formfills/values/3",
        ]

    @pytest.mark.asyncio
    async def test_field_override_path(self, api_client, transport):
        """Field overrides live under the form fill's fields."""
        transport.route("DELETE", "/form-fills/2/fields/77", 204, None)

        await FormFillService(api_client).delete_field_override(2, 77)

        assert transport.paths == ["/form-fills/2/fields/77"]


class TestOcrDocumentService:

    @pytest.mark.asyncio
    async def test_update_text_second_shape(self, api_client, transport):
        """A rejected full_text payload is resent with every spelling."""
        transport.route(
            "PATCH", "/ocr-documents/5",
            [response(422, {"detail": "unknown field"}), response(200, {"id": 5})],
        )

        await OcrDocumentService(api_client).update_text(5, "hello")

        assert body_of(transport.calls[0]) == {"full_text": "hello"}
        second = body_of(transport.calls[1])
        assert second["text"] == second["ocrText"] == "hello"
        assert len(second) == 7

    @pytest.mark.asyncio
    async def test_update_title_only_retries_on_400(self, api_client, transport):
        """A 400 on the title moves on to the wider shape."""
        transport.route("PATCH", "/ocr-documents/5", [response(400), response(200, {})])

        await OcrDocumentService(api_client).update_title(5, "Scan")

        assert body_of(transport.calls[1]) == {
            "title": "Scan",
            "name": "Scan",
            "document_name": "Scan",
        }

    @pytest.mark.asyncio
    async def test_update_title_both_shapes_rejected(self, api_client, transport):
        """Two rejected title shapes raise the backend's 400."""
        transport.route("PATCH", "/ocr-documents/5", 400, {"detail": "bad title"})

        with pytest.raises(BadRequestError, match="bad title"):
            await OcrDocumentService(api_client).update_title(5, "Scan")

        assert len(transport.calls) == 2

    @pytest.mark.asyncio
    async def test_update_page_text_after_family_miss(self, api_client, transport):
        """Page text follows the family to the spelling that exists."""
        transport.route("PATCH", "/ocr_documents/5/pages/2", 200, {})

        await OcrDocumentService(api_client).update_page_text(5, 2, None)

        assert transport.paths == ["/ocr-documents/5/pages/2", "/ocr_documents/5/pages/2"]
        assert body_of(transport.calls[-1]) == {"extracted_text": ""}

    @pytest.mark.asyncio
    async def test_create_sends_multipart(self, api_client, transport):
        """OCR uploads are multipart under 'images' with the OCR timeout."""
        transport.route("POST", "/ocr-documents", 201, {"id": 9})
        page = UploadPart(field="x", filename="scan", content=b"%PDF-1.4", content_type="application/pdf")

        await OcrDocumentService(api_client).create("Invoice", [page])

        request = transport.calls[0][3]
        assert request.form == {"title": "Invoice"}
        assert request.files[0].field == "images"
        assert request.files[0].filename == "scan.pdf"
        assert request.timeout == 60.0

    @pytest.mark.asyncio
    async def test_create_reads_local_file(self, api_client, transport, tmp_path):
        """Local paths are read and typed by extension."""
        transport.route("POST", "/ocr-documents", 201, {"id": 9})
        photo = tmp_path / "page.png"
        photo.write_bytes(b"\x89PNG")

        await OcrDocumentService(api_client).create(None, [str(photo)])

        request = transport.calls[0][3]
        assert request.form["title"].startswith("OCR ")
        assert request.files[0].content == b"\x89PNG"
        assert request.files[0].content_type == "image/png"


class TestWorkProfileService:

    @pytest.mark.asyncio
    async def test_unavailable_family(self, api_client, transport):
        """Missing work-profile routes raise FamilyRouteUnavailableError."""
        with pytest.raises(FamilyRouteUnavailableError) as exc_info:
            await WorkProfileService(api_client).list()

        assert exc_info.value.family == "work-profiles"
        assert len(transport.calls) == 4

    @pytest.mark.asyncio
    async def test_update_under_api_spelling(self, api_client, transport, prefix_state):
        """All four spellings are tried in order before /api/work_profiles."""
        transport.route("PATCH", "/api/work_profiles/1", 200, {"id": 1})

        await WorkProfileService(api_client).update(1, {"company": "ACME"})

        assert transport.paths == [
            "/work-profiles/1",
            "/work_profiles/1",
            "/api/work-profiles/1",
            "/api/work_profiles/1",
        ]
        assert all(call[0] == "PATCH" for call in transport.calls)
        assert body_of(transport.calls[-1]) == {"company": "ACME"}
        assert prefix_state.current is ApiPrefix.API

    @pytest.mark.asyncio
    async def test_get_stops_at_first_spelling_found(self, api_client, transport):
        """Later spellings are not tried once one answers."""
        transport.route("GET", "/work_profiles/2", 200, {"id": 2})

        result = await WorkProfileService(api_client).get(2)

        assert result.body == {"id": 2}
        assert transport.paths == ["/work-profiles/2", "/work_profiles/2"]

    @pytest.mark.asyncio
    async def test_non_not_found_error_is_not_masked(self, api_client, transport):
        """A validation error on the first spelling propagates as is."""
        transport.route("POST", "/work-profiles", 422, {"detail": "company required"})

        with pytest.raises(UnprocessableEntityError, match="company required"):
            await WorkProfileService(api_client).create({})

        assert transport.paths == ["/work-profiles"]


class TestAuthService:

    @pytest.mark.asyncio
    async def test_login_stores_token(self, api_client, transport, token_store):
        """Login stores the returned token."""
        transport.route("POST", "/auth/login", 200, {"token": "fresh", "user": {"id": 1}})

        session = await AuthService(api_client).login("a@b.c", "pw")

        assert session.token == "fresh"
        assert session.user == {"id": 1}
        assert await token_store.get() == "fresh"

    @pytest.mark.asyncio
    async def test_login_without_token_fails(self, api_client, transport):
        """A login response without a token is an error."""
        transport.route("POST", "/auth/login", 200, {"user": {"id": 1}})

        with pytest.raises(ScarchClientError, match="authentication token"):
            await AuthService(api_client).login("a@b.c", "pw")

    @pytest.mark.asyncio
    async def test_logout_clears_token(self, api_client, token_store):
        """Logout forgets the stored token."""
        await AuthService(api_client).logout()
        assert await token_store.get() is None


class TestTranscriptionService:

    @pytest.mark.asyncio
    async def test_create_sends_both_text_spellings(self, api_client, transport):
        """Transcription text is sent under both field names."""
        transport.route("POST", "/transcriptions", 201, {"id": 1})

        await TranscriptionService(api_client).create("Meeting", "Bonjour")

        assert body_of(transport.calls[0]) == {
            "title": "Meeting",
            "transcription_text": "Bonjour",
            "text": "Bonjour",
        }

    @pytest.mark.asyncio
    async def test_rename_strips_title(self, api_client, transport):
        """Rename trims surrounding whitespace."""
        transport.route("PATCH", "/transcriptions/4", 200, {})

        await TranscriptionService(api_client).rename(4, "  Notes  ")

        assert body_of(transport.calls[0]) == {"document_name": "Notes"}


class TestUrlBuilders:

    @pytest.mark.asyncio
    async def test_audio_file_url_uses_memoized_prefix(self, api_client, prefix_state):
        """Playback URLs are absolute, prefixed and carry the token."""
        prefix_state.remember(ApiPrefix.API_V1)

        url = await AudioService(api_client).file_url("rec 1.m4a")

        assert url == "https://api.test/api/v1/audio/file/rec%201.m4a?token=test-token"

    @pytest.mark.asyncio
    async def test_page_image_candidates(self, api_client, prefix_state):
        """Cache files come first, each bare and prefixed, endpoint last."""
        prefix_state.remember(ApiPrefix.API)

        urls = await TemplateService(api_client).page_image_url_candidates(7, 2, "scan.pdf")

        assert urls[0] == "https://api.test/uploads/templates/cache/scan_page_2.png?token=test-token"
        assert urls[1] == "https://api.test/api/uploads/templates/cache/scan_page_2.png?token=test-token"
        assert urls[-1] == "https://api.test/api/templates/7/page/2/image?token=test-token"
        assert len(urls) == len(set(urls)) == 18

    @pytest.mark.asyncio
    async def test_page_image_candidates_without_prefix_dedupes(self, api_client, prefix_state):
        """Without a prefix the bare and prefixed URLs collapse."""
        urls = await TemplateService(api_client).page_image_url_candidates(7, 1)

        assert urls == [
            "https://api.test/uploads/templates/cache/7_page-1.png?token=test-token",
            "https://api.test/templates/cache/7_page-1.png?token=test-token",
            "https://api.test/templates/7/page/1/image?token=test-token",
        ]


class TestTemplateUploads:

    @pytest.mark.asyncio
    async def test_upload_multi_caps_file_count(self, api_client, transport):
        """Multi uploads are truncated to max_upload_files."""
        transport.route("POST", "/templates/upload-multi", 201, {"id": 1})
        pages = [
            UploadPart(field="f", filename=f"p{i}.png", content=b"x")
            for i in range(5)
        ]

        with patch.object(settings, "max_upload_files", 3):
            await TemplateService(api_client).upload_multi(pages, name="  Lease ")

        request = transport.calls[0][3]
        assert len(request.files) == 3
        assert {p.content_type for p in request.files} == {"image/png"}
        assert request.form == {"kind": "document", "name": "Lease"}


class TestFormsScreenService:

    @pytest.mark.asyncio
    async def test_documents_view_falls_back_to_kind_listing(self, api_client, transport):
        """A missing view route falls back to the kind listing."""
        transport.route("GET", "/templates", 200, [{"id": 1}])

        result = await FormsScreenService(api_client).list_documents_view()

        assert result.body == [{"id": 1}]
        # the view route goes through the prefix cascade before falling back
        assert transport.paths == [
            "/templates/view/documents",
            "/api/templates/view/documents",
            "/api/v1/templates/view/documents",
            "/templates",
        ]
        assert transport.calls[-1][3].params == {"kind": "document"}

    @pytest.mark.asyncio
    async def test_delete_template_flags(self, api_client, transport):
        """Only flags that are set are sent as query params."""
        transport.route("DELETE", "/templates/3", 204, None)

        await FormsScreenService(api_client).delete_template(3)
        await FormsScreenService(api_client).delete_template(3, force=True)

        assert transport.calls[0][3].params is None
        assert transport.calls[1][3].params == {"force": True}
