from pydantic import BaseModel, Field

from leaf_detector.core.types import Detection, DetectionSummary, DiseaseInfo, OverlayRect, Severity


class DetectionOut(BaseModel):
    class_label: str
    confidence: float = Field(ge=0.0, le=1.0)
    x: float = Field(ge=0.0)
    y: float = Field(ge=0.0)
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)

    @classmethod
    def from_detection(cls, detection: Detection) -> 'DetectionOut':
        return cls(
            class_label=detection.class_label,
            confidence=detection.confidence,
            x=detection.center_x,
            y=detection.center_y,
            width=detection.width,
            height=detection.height,
        )

    def to_detection(self) -> Detection:
        return Detection(
            class_label=self.class_label,
            confidence=self.confidence,
            center_x=self.x,
            center_y=self.y,
            width=self.width,
            height=self.height,
        )


class DiseaseInfoOut(BaseModel):
    identifier: str | None = None
    matched: bool = True
    description: str
    symptoms: list[str] = []
    treatments: list[str] = []
    preventions: list[str] = []
    severity: Severity = Severity.UNKNOWN

    @classmethod
    def from_info(cls, info: DiseaseInfo, identifier: str | None = None, matched: bool = True) -> 'DiseaseInfoOut':
        return cls(
            identifier=identifier,
            matched=matched,
            description=info.description,
            symptoms=list(info.symptoms),
            treatments=list(info.treatments),
            preventions=list(info.preventions),
            severity=info.severity,
        )


class OverlayOut(BaseModel):
    left: float
    top: float
    width: float
    height: float
    color_class: str
    label: str
    confidence_percent: int = Field(ge=0, le=100)

    @classmethod
    def from_rect(cls, rect: OverlayRect) -> 'OverlayOut':
        return cls(
            left=rect.left,
            top=rect.top,
            width=rect.width,
            height=rect.height,
            color_class=rect.color_class,
            label=rect.label,
            confidence_percent=rect.confidence_percent,
        )


class DetectResponse(BaseModel):
    ok: bool = True
    model: str
    latency_ms: int
    is_healthy: bool
    detections: list[DetectionOut] = []
    primary_disease: str | None = None
    disease_info: DiseaseInfoOut | None = None
    source_width: float | None = None
    source_height: float | None = None
    overlays: list[OverlayOut] | None = None
    overlays_ready: bool = False
    rejected_count: int = 0

    @classmethod
    def from_summary(cls, summary: DetectionSummary, **extra) -> 'DetectResponse':
        disease_info = None
        if summary.disease_info is not None:
            disease_info = DiseaseInfoOut.from_info(summary.disease_info, identifier=summary.primary_disease)
        return cls(
            is_healthy=summary.is_healthy,
            detections=[DetectionOut.from_detection(item) for item in summary.detections],
            primary_disease=summary.primary_disease,
            disease_info=disease_info,
            rejected_count=len(summary.rejected),
            **extra,
        )


class OverlayRequest(BaseModel):
    detections: list[DetectionOut]
    display_width: float | None = None
    display_height: float | None = None
    source_width: float | None = None
    source_height: float | None = None


class OverlayResponse(BaseModel):
    ok: bool = True
    overlays: list[OverlayOut] = []


class HealthResponse(BaseModel):
    ok: bool
    version: str
    provider: str
    model: str | None = None
    knowledge_base_size: int
    uptime_s: float


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    message: str
    request_id: str | None = None
