"""
Scarch Client — API Facade
============================

What:  Wires one ApiClient and every service into a single `ScarchApi`
       object, and configures logging.
Who:   The app shell and scripts:

           async with ScarchApi.connect() as api:
               await api.auth.login(email, password)
               fills = await api.form_fills.list()

Lifecycle:
    connect()
    1. Configure logging
    2. Build transport, token store and the process prefix state
    3. Yield the facade
    4. Close the transport's connections on exit
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from scarch_client import __version__
from scarch_client.client import ApiClient
from scarch_client.config import settings
from scarch_client.prefix import PrefixState
from scarch_client.services import (
    AudioService,
    AuthService,
    DocumentService,
    FormFillService,
    FormsScreenService,
    OcrDocumentService,
    TemplateService,
    TranscriptionService,
    WorkProfileService,
)
from scarch_client.token_store import FileTokenStore, TokenStore
from scarch_client.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging with one consistent format across all modules.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # httpx logs every request at INFO; our exchange logger already does.
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Facade
# ══════════════════════════════════════════════════════════════════════════

# The backend's prefix is a deployment property: every facade of the
# process converges on it together.
process_prefix_state = PrefixState()


class ScarchApi:
    """All services over one shared ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthService(client)
        self.transcriptions = TranscriptionService(client)
        self.audio = AudioService(client)
        self.templates = TemplateService(client)
        self.documents = DocumentService(client)
        self.forms_screen = FormsScreenService(client)
        self.form_fills = FormFillService(client)
        self.ocr_documents = OcrDocumentService(client)
        self.work_profiles = WorkProfileService(client)

    @classmethod
    def create(
        cls,
        transport: Optional[Transport] = None,
        token_store: Optional[TokenStore] = None,
        prefix_state: Optional[PrefixState] = None,
        base_url: Optional[str] = None,
    ) -> "ScarchApi":
        base_url = base_url or settings.api_url
        client = ApiClient(
            transport=transport or HttpxTransport(base_url=base_url),
            token_store=token_store if token_store is not None else FileTokenStore(),
            prefix_state=prefix_state or process_prefix_state,
            base_url=base_url,
        )
        return cls(client)

    @classmethod
    @asynccontextmanager
    async def connect(cls, **kwargs) -> AsyncGenerator["ScarchApi", None]:
        """Build a facade, yield it, and close its connections afterwards."""
        setup_logging()
        api = cls.create(**kwargs)
        logger.info(
            "Scarch client %s ready (api_url=%s)",
            __version__,
            api.client.base_url,
        )
        try:
            yield api
        finally:
            await api.aclose()
            logger.info("Scarch client closed")

    async def aclose(self) -> None:
        await self.client.aclose()
