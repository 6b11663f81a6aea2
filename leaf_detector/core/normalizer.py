import logging
import math

from leaf_detector.core.types import Detection, DetectionSummary, Rejected

logger = logging.getLogger('leaf_detector.normalizer')

HEALTHY = DetectionSummary(is_healthy=True)

_GEOMETRY_FIELDS = (('x', 'center_x'), ('y', 'center_y'), ('width', 'width'), ('height', 'height'))


def _as_number(value) -> float | None:
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _first_output(raw) -> dict | None:
    if not isinstance(raw, dict):
        return None
    outputs = raw.get('outputs')
    if not isinstance(outputs, list) or not outputs:
        return None
    first = outputs[0]
    return first if isinstance(first, dict) else None


def _prediction_block(raw) -> dict | None:
    first = _first_output(raw)
    if first is None:
        return None
    block = first.get('predictions')
    return block if isinstance(block, dict) else None


def _image_size(block: dict) -> tuple[float, float] | None:
    image = block.get('image')
    if not isinstance(image, dict):
        return None
    width = _as_number(image.get('width'))
    height = _as_number(image.get('height'))
    if width is None or height is None or width <= 0 or height <= 0:
        return None
    return width, height


def parse_prediction(index: int, row) -> Detection | Rejected:
    """Coerce one raw prediction entry, or say why it cannot be used."""
    if not isinstance(row, dict):
        return Rejected(index, 'not_an_object')

    label = row.get('class')
    if not isinstance(label, str) or not label.strip():
        return Rejected(index, 'missing_class')

    confidence = _as_number(row.get('confidence'))
    if confidence is None:
        return Rejected(index, 'invalid_confidence')
    if confidence < 0.0 or confidence > 1.0:
        return Rejected(index, 'confidence_out_of_range')

    geometry: dict[str, float] = {}
    for source_key, target_key in _GEOMETRY_FIELDS:
        value = _as_number(row.get(source_key))
        if value is None:
            return Rejected(index, f'invalid_{source_key}')
        if value < 0.0:
            return Rejected(index, f'negative_{source_key}')
        geometry[target_key] = value

    return Detection(class_label=label.strip(), confidence=confidence, **geometry)


def normalize(raw) -> DetectionSummary:
    """Flatten a raw inference response into a validated DetectionSummary.

    The expected shape is ``outputs[0].predictions.predictions``. Anything
    else, an empty list, or a list in which no entry validates is reported
    as the healthy outcome. This function never raises.
    """
    block = _prediction_block(raw)
    if block is None:
        return HEALTHY
    rows = block.get('predictions')
    if not isinstance(rows, list) or not rows:
        return HEALTHY

    detections: list[Detection] = []
    rejected: list[Rejected] = []
    for index, row in enumerate(rows):
        parsed = parse_prediction(index, row)
        if isinstance(parsed, Rejected):
            logger.debug('Dropped prediction index=%s reason=%s', parsed.index, parsed.reason)
            rejected.append(parsed)
            continue
        detections.append(parsed)

    if not detections:
        return DetectionSummary(is_healthy=True, rejected=tuple(rejected))

    return DetectionSummary(
        is_healthy=False,
        detections=tuple(detections),
        image_size=_image_size(block),
        rejected=tuple(rejected),
    )
