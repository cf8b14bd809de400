# /app/services/text_extraction_service.py

"""
Turns a submitted file into plain text for scoring.

Dispatch is by MIME type first and file extension second:
- images are transcribed by the vision model;
- PDFs use their embedded text layer, and scanned PDFs (no text layer) are
  rendered page by page and transcribed by the vision model;
- .docx files are read with python-docx;
- legacy .doc files are rejected with `UnsupportedFormatError`;
- anything else is downloaded and decoded as text.

Nothing is cached; every call re-downloads and re-extracts.
"""

import io
import asyncio
from typing import List, Optional
from urllib.parse import urlparse

import docx
import fitz  # PyMuPDF
import httpx
from PIL import Image, UnidentifiedImageError

from app.core import config
from app.core.exceptions import FetchError, UnsupportedFormatError
from . import gemini_service, prompt_library, storage_service

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "bmp", "webp"}
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_RENDER_DPI = 150

# File kinds returned by `classify_file`.
KIND_IMAGE = "image"
KIND_PDF = "pdf"
KIND_DOCX = "docx"
KIND_DOC = "doc"
KIND_TEXT = "text"


def _extension_of(file_url: str) -> str:
    try:
        path = urlparse(file_url).path
    except ValueError as e:
        raise FetchError(f"Invalid file URL {file_url!r}: {e}")
    _, _, ext = path.rpartition(".")
    return ext.lower() if "." in path.rsplit("/", 1)[-1] else ""


def classify_file(file_url: str, file_type: Optional[str] = None) -> str:
    """Decides which extraction strategy applies to a file."""
    mime = (file_type or "").lower()
    ext = _extension_of(file_url)

    if "image" in mime or ext in IMAGE_EXTENSIONS:
        return KIND_IMAGE
    if "pdf" in mime or ext == "pdf":
        return KIND_PDF
    if "wordprocessingml" in mime or ext == "docx":
        return KIND_DOCX
    if "msword" in mime or "word" in mime or ext == "doc":
        return KIND_DOC
    return KIND_TEXT


async def _download_file(file_url: str) -> bytes:
    """
    Fetches the raw bytes of a file. Files held by the local object store are
    read directly; everything else is fetched over HTTP.
    """
    local_bytes = storage_service.read_public_url(file_url)
    if local_bytes is not None:
        return local_bytes

    try:
        async with httpx.AsyncClient(timeout=config.get_fetch_timeout_seconds(), follow_redirects=True) as client:
            response = await client.get(file_url)
            response.raise_for_status()
            return response.content
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        print(f"ERROR fetching submission file {file_url}: {e}")
        raise FetchError(f"Unable to fetch file from {file_url}: {e}")


# --- Format-specific extractors ---

async def _extract_from_images(images: List[Image.Image], log_context: str) -> str:
    return await gemini_service.generate_multimodal_response(
        prompt_library.SUBMISSION_OCR_PROMPT,
        images,
        temperature=0.1,
        max_output_tokens=2000,
        log_context=log_context,
    )


def _open_image(file_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(file_bytes))
        image.load()
        return image
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedFormatError(f"The image file could not be read: {e}")


def _read_pdf(file_bytes: bytes) -> tuple:
    """
    Returns the PDF's embedded text and, when that text is empty, the pages
    rendered as images so they can be transcribed instead.
    """
    try:
        pdf_document = fitz.open(stream=file_bytes, filetype="pdf")
    except Exception as e:
        raise UnsupportedFormatError(f"The PDF file could not be read: {e}")

    with pdf_document:
        page_texts = [page.get_text().strip() for page in pdf_document]
        text = "\n\n".join(t for t in page_texts if t)
        if text:
            return text, []

        images = []
        for page in pdf_document:
            pix = page.get_pixmap(dpi=PDF_RENDER_DPI)
            images.append(Image.open(io.BytesIO(pix.tobytes("png"))))
        return "", images


def _read_docx(file_bytes: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(file_bytes))
    except Exception as e:
        raise UnsupportedFormatError(f"The Word document could not be read: {e}")

    lines = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines)


# --- Public entry point ---

async def extract_text(file_url: str, file_type: Optional[str] = None) -> str:
    """
    Extracts plain text from the file at `file_url`.

    Args:
        file_url: The public URL of the submitted file.
        file_type: Optional MIME type hint recorded at upload time.

    Raises:
        UnsupportedFormatError: for legacy .doc files and unreadable documents.
        FetchError: if the file cannot be downloaded.
        UpstreamError: if the vision model call fails.
    """
    kind = classify_file(file_url, file_type)
    print(f"[PIPELINE] Extracting text from {kind} file: {file_url}")

    if kind == KIND_DOC:
        raise UnsupportedFormatError(
            "Legacy Word (.doc) documents are not supported. Please resubmit as .docx or PDF."
        )

    file_bytes = await _download_file(file_url)

    if kind == KIND_IMAGE:
        image = _open_image(file_bytes)
        extracted_text = await _extract_from_images([image], log_context="EXTRACT-TEXT (Image)")
    elif kind == KIND_PDF:
        extracted_text, page_images = await asyncio.to_thread(_read_pdf, file_bytes)
        if page_images:
            print(f"[PIPELINE] PDF has no text layer, transcribing {len(page_images)} page(s) with vision.")
            extracted_text = await _extract_from_images(page_images, log_context="EXTRACT-TEXT (Scanned PDF)")
    elif kind == KIND_DOCX:
        extracted_text = await asyncio.to_thread(_read_docx, file_bytes)
    else:
        extracted_text = file_bytes.decode("utf-8", errors="replace")

    print(f"[PIPELINE] Text extraction completed, length: {len(extracted_text)}")
    return extracted_text
