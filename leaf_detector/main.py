import logging
import time
import uuid

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from leaf_detector.config import get_settings
from leaf_detector.core.detector import create_detector
from leaf_detector.core.errors import LeafDetectorError, OverlayNotReadyError
from leaf_detector.core.knowledge_base import DiseaseKnowledgeBase
from leaf_detector.core.overlay import compute_overlays
from leaf_detector.core.selector import interpret
from leaf_detector.logging_setup import setup_logging
from leaf_detector.schemas import (
    DetectResponse,
    DiseaseInfoOut,
    ErrorResponse,
    HealthResponse,
    OverlayOut,
    OverlayRequest,
    OverlayResponse,
)
from leaf_detector.utils.image_io import read_image_size, validate_upload

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger('leaf_detector')

app = FastAPI(title='Leaf Disease Detector', version=settings.version)
started_at = time.time()


def _request_id(request: Request) -> str:
    return request.headers.get('x-request-id') or str(uuid.uuid4())


@app.on_event('startup')
def startup_event() -> None:
    detector = create_detector(settings)
    knowledge_base = DiseaseKnowledgeBase.from_path(settings.knowledge_base_path)
    app.state.detector = detector
    app.state.knowledge_base = knowledge_base
    logger.info(
        'Detector initialized provider=%s model=%s sort_by_confidence=%s',
        settings.provider,
        detector.model_id,
        settings.sort_by_confidence,
    )
    logger.info(
        'Knowledge base loaded path=%s size=%s diseases=%s',
        settings.knowledge_base_path,
        knowledge_base.size,
        ','.join(knowledge_base.identifiers),
    )


@app.exception_handler(LeafDetectorError)
async def leaf_detector_error_handler(request: Request, exc: LeafDetectorError):
    payload = ErrorResponse(
        error=exc.code,
        message=exc.message,
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload.model_dump())


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.exception('Unhandled exception request_id=%s', request_id)
    payload = ErrorResponse(
        error='UNEXPECTED_SERVER_ERROR',
        message='Unexpected server error.',
        request_id=request_id,
    )
    return JSONResponse(status_code=500, content=payload.model_dump())


@app.get('/health', response_model=HealthResponse)
def health():
    detector = app.state.detector
    return HealthResponse(
        ok=True,
        version=settings.version,
        provider=settings.provider,
        model=getattr(detector, 'model_id', None),
        knowledge_base_size=app.state.knowledge_base.size,
        uptime_s=round(time.time() - started_at, 3),
    )


@app.post('/detect', response_model=DetectResponse)
async def detect(
    request: Request,
    image: UploadFile = File(...),
    display_width: float | None = Form(default=None),
    display_height: float | None = Form(default=None),
):
    request_id = _request_id(request)
    start = time.perf_counter()

    image_bytes = await image.read()
    validate_upload(image_bytes, image.content_type, settings.max_image_bytes)
    uploaded_size = read_image_size(image_bytes)

    detector = app.state.detector
    knowledge_base: DiseaseKnowledgeBase = app.state.knowledge_base
    raw = await run_in_threadpool(detector.infer, image_bytes, image.content_type)
    summary = interpret(raw, knowledge_base, sort_by_confidence=settings.sort_by_confidence)

    # prefer the size the service ran inference on
    source_width, source_height = summary.image_size or uploaded_size

    overlays: list[OverlayOut] | None = None
    if display_width is not None and display_height is not None:
        try:
            rects = compute_overlays(
                summary.detections,
                display_width,
                display_height,
                source_width,
                source_height,
                palette=settings.palette,
            )
        except OverlayNotReadyError as exc:
            logger.info('Overlays deferred request_id=%s reason=%s', request_id, exc.message)
        else:
            overlays = [OverlayOut.from_rect(rect) for rect in rects]

    latency_ms = max(int((time.perf_counter() - start) * 1000), 1)
    logger.info(
        'detect request_id=%s bytes=%s healthy=%s detections=%s rejected=%s primary=%s overlays=%s latency_ms=%s',
        request_id,
        len(image_bytes),
        summary.is_healthy,
        len(summary.detections),
        len(summary.rejected),
        summary.primary_disease,
        None if overlays is None else len(overlays),
        latency_ms,
    )
    return DetectResponse.from_summary(
        summary,
        model=detector.model_id,
        latency_ms=latency_ms,
        source_width=source_width,
        source_height=source_height,
        overlays=overlays,
        overlays_ready=overlays is not None,
    )


@app.post('/overlays', response_model=OverlayResponse)
def overlay_rects(payload: OverlayRequest):
    rects = compute_overlays(
        [item.to_detection() for item in payload.detections],
        payload.display_width,
        payload.display_height,
        payload.source_width,
        payload.source_height,
        palette=settings.palette,
    )
    return OverlayResponse(overlays=[OverlayOut.from_rect(rect) for rect in rects])


@app.get('/diseases/{identifier}', response_model=DiseaseInfoOut)
def disease_info(identifier: str):
    knowledge_base: DiseaseKnowledgeBase = app.state.knowledge_base
    return DiseaseInfoOut.from_info(
        knowledge_base.lookup(identifier),
        identifier=identifier,
        matched=identifier in knowledge_base,
    )


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('leaf_detector.main:app', host=settings.host, port=settings.port, log_level=settings.log_level.lower())
