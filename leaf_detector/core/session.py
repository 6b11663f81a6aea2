import logging
from enum import Enum

from leaf_detector.core.errors import SessionStateError
from leaf_detector.core.types import DetectionSummary

logger = logging.getLogger('leaf_detector.session')


class SessionState(str, Enum):
    IDLE = 'idle'
    IMAGE_SELECTED = 'image_selected'
    ANALYZING = 'analyzing'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


_CAN_ANALYZE = {SessionState.IMAGE_SELECTED, SessionState.SUCCEEDED, SessionState.FAILED}


class DetectionSession:
    """Tracks one view's image and its in-flight detection request.

    Every image change and every new analysis bumps ``generation``. A result
    is only accepted for the generation that started it, so a late response
    for an earlier run, or for an image that has since been replaced or
    cleared, is dropped.
    """

    def __init__(self) -> None:
        self._state = SessionState.IDLE
        self._generation = 0
        self._image_id: str | None = None
        self._summary: DetectionSummary | None = None
        self._error: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def image_id(self) -> str | None:
        return self._image_id

    @property
    def summary(self) -> DetectionSummary | None:
        return self._summary

    @property
    def error(self) -> str | None:
        return self._error

    def _reset(self, state: SessionState, image_id: str | None) -> None:
        self._generation += 1
        self._state = state
        self._image_id = image_id
        self._summary = None
        self._error = None

    def select_image(self, image_id: str) -> None:
        self._reset(SessionState.IMAGE_SELECTED, image_id)

    def clear(self) -> None:
        self._reset(SessionState.IDLE, None)

    def begin_analysis(self) -> int:
        if self._state == SessionState.ANALYZING:
            raise SessionStateError('A detection request is already running for this image.')
        if self._state not in _CAN_ANALYZE:
            raise SessionStateError('Select an image before starting detection.')
        self._generation += 1
        self._state = SessionState.ANALYZING
        self._summary = None
        self._error = None
        return self._generation

    def _accepts(self, generation: int) -> bool:
        if generation != self._generation or self._state != SessionState.ANALYZING:
            logger.debug(
                'Discarding stale result generation=%s current=%s state=%s',
                generation,
                self._generation,
                self._state.value,
            )
            return False
        return True

    def complete(self, generation: int, summary: DetectionSummary) -> bool:
        if not self._accepts(generation):
            return False
        self._state = SessionState.SUCCEEDED
        self._summary = summary
        return True

    def fail(self, generation: int, message: str) -> bool:
        if not self._accepts(generation):
            return False
        self._state = SessionState.FAILED
        self._error = message
        return True
