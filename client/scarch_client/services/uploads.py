"""
Scarch Client — Upload Helpers
================================

What:  Builds multipart file parts from local files or picker results.
How:   Infers a MIME type and file name the backend will accept, then reads
       the bytes with aiofiles.
Who:   Audio, template and OCR-document services.

Inference rules:
    1. A declared type containing "/" wins (e.g. "image/png" from the picker).
    2. Otherwise the extension decides, falling back to a per-upload default.
    3. A name without extension gets the extension of the chosen type.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import aiofiles

from scarch_client.schemas import UploadPart

logger = logging.getLogger(__name__)

EXTENSION_MIME_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".m4a": "audio/m4a",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
}

MIME_EXTENSIONS: Dict[str, str] = {
    "application/pdf": ".pdf",
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "audio/m4a": ".m4a",
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/webm": ".webm",
}


def infer_mime_type(filename: str, declared: Optional[str] = None, default: str = "image/jpeg") -> str:
    declared = str(declared or "")
    if "/" in declared:
        return declared
    return EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower(), default)


def normalize_filename(filename: str, mime_type: str) -> str:
    """Adds an extension matching the MIME type when the name has none."""
    if "." in filename:
        return filename
    return f"{filename}{MIME_EXTENSIONS.get(mime_type, '.jpg')}"


def build_part(
    field: str,
    content: bytes,
    filename: str,
    content_type: Optional[str] = None,
    default_type: str = "image/jpeg",
) -> UploadPart:
    mime_type = infer_mime_type(filename, content_type, default_type)
    return UploadPart(
        field=field,
        filename=normalize_filename(filename, mime_type),
        content=content,
        content_type=mime_type,
    )


async def load_upload(
    path: str,
    field: str,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    default_type: str = "image/jpeg",
) -> UploadPart:
    """
    Read a local file into an UploadPart.

    Raises:
        FileNotFoundError / OSError from the read, unchanged.
    """
    source = Path(path).expanduser()
    async with aiofiles.open(source, "rb") as f:
        content = await f.read()
    logger.debug("Loaded %s (%d bytes) for upload field '%s'", source.name, len(content), field)
    return build_part(field, content, filename or source.name, content_type, default_type)


async def prepare_parts(
    files: Sequence[Union[str, UploadPart]],
    field: str,
    default_type: str = "image/jpeg",
    fallback_name: str = "page-{index}",
    limit: Optional[int] = None,
) -> List[UploadPart]:
    """
    Turn local paths and ready-made parts into parts under one field name.

    Ready-made parts keep their bytes but get the field, an inferred type
    and an extension when they lack them. Blank names become
    `fallback_name` with the 1-based index filled in.
    """
    selected = list(files)[:limit] if limit else list(files)
    parts: List[UploadPart] = []
    for index, item in enumerate(selected, start=1):
        if isinstance(item, UploadPart):
            name = item.filename or fallback_name.format(index=index)
            parts.append(build_part(field, item.content, name, item.content_type, default_type))
        else:
            parts.append(await load_upload(str(item), field, default_type=default_type))
    return parts
