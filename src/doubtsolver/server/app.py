"""FastAPI backend proxy.

Exposes doubt solving and PDF generation so that browser clients never hold
a provider credential. The answer provider is injected by the caller.
"""

import asyncio
import base64
import binascii
import logging
import re
from contextlib import asynccontextmanager
from io import BytesIO

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from ..capture.models import EncodedImage, PendingRequest
from ..config import MAX_IMAGE_BYTES, LanguageMode
from ..errors import ExportError, ValidationError
from ..llm.base import AnswerProvider
from ..llm.models import Success
from ..pdf import PdfRenderer, pdf_filename
from .schemas import ErrorResponse, PdfRequest, SolveRequest, SolveResponse

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def decode_data_url(data_url: str) -> EncodedImage:
    """Parse an image data URL from a client.

    Raises:
        ValidationError: If it is not a base64 image data URL or is too large
    """
    match = _DATA_URL.match(data_url.strip())
    if not match:
        raise ValidationError("Image must be a base64 data URL")

    data = match.group("data")
    try:
        size = len(base64.b64decode(data, validate=True))
    except binascii.Error as e:
        raise ValidationError("Image is not valid base64") from e
    if size > MAX_IMAGE_BYTES:
        raise ValidationError("Image size should be less than 5MB")

    return EncodedImage(mime_type=match.group("mime"), data=data, size_bytes=size)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(provider: AnswerProvider, renderer: PdfRenderer | None = None) -> FastAPI:
    """Build the API application around an answer provider.

    The provider is closed when the application shuts down.
    """
    renderer = renderer or PdfRenderer()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Doubt Solver API using %s provider", provider.name)
        yield
        await provider.close()

    app = FastAPI(title="Doubt Solver AI API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Doubt Solver AI API is running"

    @app.post(
        "/api/solve",
        response_model=SolveResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def solve(body: SolveRequest | None = None):
        body = body or SolveRequest()
        if not body.question or not body.question.strip():
            return _error(400, "Question is required")

        image = None
        if body.image:
            try:
                image = decode_data_url(body.image)
            except ValidationError as e:
                return _error(400, str(e))

        request = PendingRequest(
            text=body.question.strip(),
            image=image,
            language=body.language or LanguageMode.ENGLISH,
            context=body.context or "",
        )
        result = await provider.resolve(request)

        if not isinstance(result, Success):
            logger.error("Error in /api/solve: %s (%s)", result.kind.value, result.detail)
            return _error(500, "Failed to solve doubt")

        return SolveResponse(answer=result.text)

    @app.post(
        "/api/generate-pdf",
        response_class=StreamingResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def generate_pdf(body: PdfRequest | None = None):
        body = body or PdfRequest()
        if not body.content:
            return _error(400, "Content is required for PDF")

        # Rendered fully before any header is sent, so failures can still be a 500
        try:
            data = await asyncio.to_thread(renderer.render, body.content, body.title)
        except ExportError as e:
            logger.error("Error in /api/generate-pdf: %s", e)
            return _error(500, "Failed to generate PDF")

        filename = pdf_filename(body.title).encode("latin-1", "replace").decode("latin-1")
        return StreamingResponse(
            BytesIO(data),
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app
