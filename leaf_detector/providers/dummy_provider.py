from leaf_detector.core.detector import Detector


class DummyProvider(Detector):
    def __init__(self, model_id: str = 'dummy-v1') -> None:
        self._model_id = model_id

    @property
    def model_id(self) -> str:
        return self._model_id

    def infer(self, image_bytes: bytes, content_type: str | None = None) -> dict:
        return {
            'outputs': [
                {
                    'predictions': {
                        'image': {'width': 640, 'height': 480},
                        'predictions': [
                            {'class': 'Early_Blight', 'confidence': 0.91, 'x': 50, 'y': 60, 'width': 30, 'height': 20},
                            {'class': 'Late_Blight', 'confidence': 0.40, 'x': 120, 'y': 80, 'width': 25, 'height': 15},
                        ],
                    }
                }
            ]
        }
