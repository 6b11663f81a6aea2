from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    UNKNOWN = 'Unknown'
    MEDIUM = 'Medium'
    HIGH = 'High'
    CRITICAL = 'Critical'

    @classmethod
    def parse(cls, value) -> 'Severity':
        text = str(value or '').strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class Detection:
    class_label: str
    confidence: float
    center_x: float
    center_y: float
    width: float
    height: float


@dataclass(frozen=True)
class Rejected:
    index: int
    reason: str


@dataclass(frozen=True)
class DiseaseInfo:
    description: str
    symptoms: tuple[str, ...] = ()
    treatments: tuple[str, ...] = ()
    preventions: tuple[str, ...] = ()
    severity: Severity = Severity.UNKNOWN


@dataclass(frozen=True)
class OverlayRect:
    left: float
    top: float
    width: float
    height: float
    color_class: str
    label: str
    confidence_percent: int


@dataclass(frozen=True)
class DetectionSummary:
    is_healthy: bool
    detections: tuple[Detection, ...] = ()
    primary_disease: str | None = None
    disease_info: DiseaseInfo | None = None
    image_size: tuple[float, float] | None = None
    rejected: tuple[Rejected, ...] = field(default=(), compare=False)
