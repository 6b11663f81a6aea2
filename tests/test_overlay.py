import pytest

from leaf_detector.core.errors import OverlayNotReadyError
from leaf_detector.core.overlay import color_for_index, compute_overlays, confidence_percent, display_label
from leaf_detector.core.types import Detection


def test_overlay_is_scaled_to_display_size():
    detection = Detection('Early_Blight', 0.5, 100, 100, 40, 20)

    (rect,) = compute_overlays([detection], 400, 400, 200, 200)

    assert rect.left == 160
    assert rect.top == 160
    assert rect.width == 80
    assert rect.height == 40


def test_axes_scale_independently():
    detection = Detection('Late_Blight', 0.5, 100, 50, 20, 10)

    (rect,) = compute_overlays([detection], 100, 300, 200, 100)

    assert (rect.left, rect.top, rect.width, rect.height) == (45.0, 135.0, 10.0, 30.0)


def test_native_size_uses_raw_coordinates():
    detection = Detection('Late_Blight', 0.5, 120, 80, 25, 15)

    (rect,) = compute_overlays([detection], 640, 480, 640, 480)

    assert (rect.left, rect.top, rect.width, rect.height) == (107.5, 72.5, 25.0, 15.0)


def test_colors_cycle_by_index_and_order_is_preserved():
    detections = [Detection(f'Disease_{index}', 0.5, 10, 10, 2, 2) for index in range(5)]

    overlays = compute_overlays(detections, 100, 100, 100, 100)

    assert [item.color_class for item in overlays] == ['red', 'blue', 'green', 'red', 'blue']
    assert [item.label for item in overlays] == [f'Disease {index}' for index in range(5)]
    assert compute_overlays(detections, 100, 100, 100, 100) == overlays


def test_custom_palette():
    detections = [Detection('A', 0.5, 10, 10, 2, 2)] * 4

    overlays = compute_overlays(detections, 10, 10, 10, 10, palette=('amber', 'teal', 'violet', 'pink'))

    assert [item.color_class for item in overlays] == ['amber', 'teal', 'violet', 'pink']


def test_short_palette_is_rejected():
    with pytest.raises(ValueError):
        color_for_index(0, ('red', 'blue'))


@pytest.mark.parametrize(
    'dimensions',
    [
        (None, 400, 200, 200),
        (400, 0, 200, 200),
        (400, 400, None, 200),
        (400, 400, 200, -5),
        (float('nan'), 400, 200, 200),
    ],
)
def test_missing_dimensions_are_not_ready(dimensions):
    detection = Detection('Early_Blight', 0.5, 100, 100, 40, 20)

    with pytest.raises(OverlayNotReadyError) as excinfo:
        compute_overlays([detection], *dimensions)

    assert excinfo.value.code == 'OVERLAY_NOT_READY'


def test_empty_detections_give_no_overlays():
    assert compute_overlays([], 100, 100, 100, 100) == ()


@pytest.mark.parametrize(
    ('confidence', 'percent'),
    [(0.0, 0), (0.004, 0), (0.125, 13), (0.91, 91), (0.996, 100), (1.0, 100)],
)
def test_confidence_percent(confidence, percent):
    assert confidence_percent(confidence) == percent


def test_display_label_replaces_underscores():
    assert display_label('Spotted_Wilt virus') == 'Spotted Wilt virus'
    assert display_label('Early__Blight') == 'Early  Blight'
