import pytest

from leaf_detector.core.errors import SessionStateError
from leaf_detector.core.session import DetectionSession, SessionState
from leaf_detector.core.types import DetectionSummary


def test_happy_path_reaches_succeeded():
    session = DetectionSession()
    assert session.state is SessionState.IDLE

    session.select_image('leaf-1.jpg')
    generation = session.begin_analysis()
    accepted = session.complete(generation, DetectionSummary(is_healthy=True))

    assert accepted is True
    assert session.state is SessionState.SUCCEEDED
    assert session.summary == DetectionSummary(is_healthy=True)
    assert session.image_id == 'leaf-1.jpg'


def test_failure_records_message():
    session = DetectionSession()
    session.select_image('leaf-1.jpg')
    generation = session.begin_analysis()

    assert session.fail(generation, 'Could not complete detection.') is True
    assert session.state is SessionState.FAILED
    assert session.error == 'Could not complete detection.'
    assert session.summary is None


def test_only_one_request_in_flight():
    session = DetectionSession()
    session.select_image('leaf-1.jpg')
    session.begin_analysis()

    with pytest.raises(SessionStateError):
        session.begin_analysis()


def test_cannot_analyze_without_image():
    session = DetectionSession()

    with pytest.raises(SessionStateError):
        session.begin_analysis()


def test_result_for_replaced_image_is_discarded():
    session = DetectionSession()
    session.select_image('leaf-1.jpg')
    stale = session.begin_analysis()

    session.select_image('leaf-2.jpg')

    assert session.complete(stale, DetectionSummary(is_healthy=True)) is False
    assert session.state is SessionState.IMAGE_SELECTED
    assert session.summary is None
    assert session.image_id == 'leaf-2.jpg'


def test_result_after_clear_is_discarded():
    session = DetectionSession()
    session.select_image('leaf-1.jpg')
    stale = session.begin_analysis()

    session.clear()

    assert session.fail(stale, 'timeout') is False
    assert session.state is SessionState.IDLE
    assert session.error is None


def test_rerun_gets_new_generation_and_ignores_earlier_reply():
    session = DetectionSession()
    session.select_image('leaf-1.jpg')
    first = session.begin_analysis()
    session.fail(first, 'timeout')

    second = session.begin_analysis()

    assert second != first
    assert session.complete(first, DetectionSummary(is_healthy=False)) is False
    assert session.state is SessionState.ANALYZING
    assert session.complete(second, DetectionSummary(is_healthy=True)) is True
    assert session.complete(second, DetectionSummary(is_healthy=False)) is False
    assert session.summary.is_healthy is True
