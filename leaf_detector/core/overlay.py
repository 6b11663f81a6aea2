import math
from collections.abc import Sequence

from leaf_detector.core.errors import OverlayNotReadyError
from leaf_detector.core.types import Detection, OverlayRect

DEFAULT_PALETTE: tuple[str, ...] = ('red', 'blue', 'green')
MIN_PALETTE_SIZE = 3


def color_for_index(index: int, palette: Sequence[str] = DEFAULT_PALETTE) -> str:
    if len(palette) < MIN_PALETTE_SIZE:
        raise ValueError(f'Overlay palette needs at least {MIN_PALETTE_SIZE} colors, got {len(palette)}.')
    return palette[index % len(palette)]


def display_label(class_label: str) -> str:
    return class_label.replace('_', ' ')


def confidence_percent(confidence: float) -> int:
    # half away from zero; round() would send 0.125 -> 12
    return int(math.floor(confidence * 100 + 0.5))


def _require_positive(**dimensions) -> None:
    missing = {
        name: value
        for name, value in dimensions.items()
        if value is None or not math.isfinite(float(value)) or float(value) <= 0
    }
    if missing:
        raise OverlayNotReadyError(
            f'Overlay needs positive dimensions, missing: {", ".join(sorted(missing))}.',
            details={'missing': sorted(missing)},
        )


def compute_overlays(
    detections: Sequence[Detection],
    display_width: float | None,
    display_height: float | None,
    source_width: float | None,
    source_height: float | None,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> tuple[OverlayRect, ...]:
    """Place each detection on the rendered image.

    Detection geometry is the box center plus full width/height in source
    pixels. Each axis is scaled by display/source on its own, so a letterboxed
    or stretched rendering still lines up. Order follows ``detections``.
    """
    _require_positive(
        display_width=display_width,
        display_height=display_height,
        source_width=source_width,
        source_height=source_height,
    )
    scale_x = float(display_width) / float(source_width)
    scale_y = float(display_height) / float(source_height)

    overlays: list[OverlayRect] = []
    for index, detection in enumerate(detections):
        width = detection.width * scale_x
        height = detection.height * scale_y
        overlays.append(
            OverlayRect(
                left=detection.center_x * scale_x - width / 2,
                top=detection.center_y * scale_y - height / 2,
                width=width,
                height=height,
                color_class=color_for_index(index, palette),
                label=display_label(detection.class_label),
                confidence_percent=confidence_percent(detection.confidence),
            )
        )
    return tuple(overlays)
