import base64
import logging
import time
from typing import Any

import httpx

from leaf_detector.core.detector import Detector
from leaf_detector.core.errors import InferenceError

logger = logging.getLogger('leaf_detector.providers.roboflow')

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def _join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class RoboflowWorkflowProvider(Detector):
    def __init__(
        self,
        base_url: str = 'https://serverless.roboflow.com',
        workflow_path: str = '/infer/workflows/mythili-btkov/custom-workflow',
        api_key: str = '',
        timeout_ms: int = 15000,
        max_retries: int = 2,
        retry_backoff_ms: int = 500,
    ) -> None:
        self._url = _join_url(base_url, workflow_path)
        self._api_key = api_key
        self._timeout = max(int(timeout_ms), 1000) / 1000.0
        self._max_retries = max(int(max_retries), 0)
        self._backoff = max(int(retry_backoff_ms), 0) / 1000.0
        self._model_id = workflow_path.strip('/').rsplit('/', 1)[-1] or 'roboflow-workflow'

    @property
    def model_id(self) -> str:
        return self._model_id

    def _payload(self, image_bytes: bytes) -> dict:
        return {
            'api_key': self._api_key,
            'inputs': {
                'image': {
                    'type': 'base64',
                    'value': base64.b64encode(image_bytes).decode('ascii'),
                },
            },
        }

    def infer(self, image_bytes: bytes, content_type: str | None = None) -> Any:
        payload = self._payload(image_bytes)
        attempts = self._max_retries + 1
        last_error: str | None = None

        with httpx.Client(timeout=self._timeout) as client:
            for attempt in range(1, attempts + 1):
                try:
                    response = client.post(self._url, json=payload)
                except httpx.TransportError as exc:
                    last_error = f'{type(exc).__name__}: {exc}'
                else:
                    if response.status_code < 400:
                        return self._decode(response)
                    last_error = f'status={response.status_code}'
                    if response.status_code not in _RETRYABLE_STATUS:
                        break

                if attempt < attempts:
                    logger.warning(
                        'Inference attempt failed attempt=%s/%s error=%s; retrying',
                        attempt,
                        attempts,
                        last_error,
                    )
                    time.sleep(self._backoff * attempt)

        logger.error('Inference request failed url=%s error=%s', self._url, last_error)
        raise InferenceError(details={'reason': last_error})

    def _decode(self, response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError as exc:
            raise InferenceError(details={'reason': 'invalid_json'}) from exc
        return body
