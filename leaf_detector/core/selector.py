from dataclasses import replace

from leaf_detector.core.knowledge_base import DiseaseKnowledgeBase
from leaf_detector.core.normalizer import normalize
from leaf_detector.core.types import Detection, DetectionSummary


def _pick(detections: tuple[Detection, ...], sort_by_confidence: bool) -> Detection:
    if not sort_by_confidence:
        return detections[0]
    # max() keeps the first of equal confidences
    return max(detections, key=lambda item: item.confidence)


def select_primary(
    summary: DetectionSummary,
    knowledge_base: DiseaseKnowledgeBase,
    sort_by_confidence: bool = False,
) -> DetectionSummary:
    """Fill in the primary disease and its knowledge base entry.

    By default the first detection wins, trusting the service to return
    predictions ordered by descending confidence. With ``sort_by_confidence``
    the highest confidence detection is chosen instead.
    """
    if summary.is_healthy or not summary.detections:
        return summary
    primary = _pick(summary.detections, sort_by_confidence).class_label
    return replace(summary, primary_disease=primary, disease_info=knowledge_base.lookup(primary))


def interpret(raw, knowledge_base: DiseaseKnowledgeBase, sort_by_confidence: bool = False) -> DetectionSummary:
    return select_primary(normalize(raw), knowledge_base, sort_by_confidence=sort_by_confidence)
