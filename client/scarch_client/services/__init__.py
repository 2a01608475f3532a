"""
Scarch Client — Services Package
==================================

What:  Typed call-site wrappers, one per backend resource. These are what
       screens and scripts call.

Two kinds of services:
    - Fixed-route services (auth, transcriptions, audio, templates,
      documents, forms screen) call one logical path and rely on the
      ApiClient's prefix handling.
    - Family services (form fills, OCR documents, work profiles) also
      cascade over candidate route spellings, see `cascade.py`.
"""

from scarch_client.services.audio import AudioService
from scarch_client.services.auth import AuthService
from scarch_client.services.documents import DocumentService
from scarch_client.services.form_fills import FormFillService
from scarch_client.services.forms_screen import FormsScreenService
from scarch_client.services.ocr_documents import OcrDocumentService
from scarch_client.services.templates import TemplateService
from scarch_client.services.transcriptions import TranscriptionService
from scarch_client.services.work_profiles import WorkProfileService

__all__ = [
    "AudioService",
    "AuthService",
    "DocumentService",
    "FormFillService",
    "FormsScreenService",
    "OcrDocumentService",
    "TemplateService",
    "TranscriptionService",
    "WorkProfileService",
]
