from abc import ABC, abstractmethod
from typing import Any

from leaf_detector.config import Settings


class Detector(ABC):
    @abstractmethod
    def infer(self, image_bytes: bytes, content_type: str | None = None) -> Any:
        """Return the raw, unvalidated response tree for one image."""
        raise NotImplementedError

    @property
    @abstractmethod
    def model_id(self) -> str:
        raise NotImplementedError


def create_detector(settings: Settings) -> Detector:
    provider = settings.provider.strip().lower()
    if provider == 'dummy':
        from leaf_detector.providers.dummy_provider import DummyProvider

        return DummyProvider(model_id='dummy-v1')
    if provider == 'roboflow':
        from leaf_detector.providers.roboflow_provider import RoboflowWorkflowProvider

        return RoboflowWorkflowProvider(
            base_url=settings.inference_base_url,
            workflow_path=settings.workflow_path,
            api_key=settings.inference_api_key,
            timeout_ms=settings.inference_timeout_ms,
            max_retries=settings.inference_max_retries,
            retry_backoff_ms=settings.inference_retry_backoff_ms,
        )
    raise ValueError(f'Unsupported PROVIDER={settings.provider!r}')
