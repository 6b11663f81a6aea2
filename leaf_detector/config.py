from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from leaf_detector.core.overlay import MIN_PALETTE_SIZE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    provider: str = 'dummy'
    inference_base_url: str = 'https://serverless.roboflow.com'
    workflow_path: str = '/infer/workflows/mythili-btkov/custom-workflow'
    inference_api_key: str = ''
    inference_timeout_ms: int = 15000
    inference_max_retries: int = 2
    inference_retry_backoff_ms: int = 500
    knowledge_base_path: str = 'leaf_detector/data/diseases.json'
    sort_by_confidence: bool = False
    overlay_palette: str = 'red,blue,green'
    max_image_bytes: int = 5 * 1024 * 1024
    host: str = '127.0.0.1'
    port: int = 8001
    log_level: str = 'INFO'
    version: str = '1.0.0'

    @field_validator('overlay_palette')
    @classmethod
    def check_palette(cls, value: str) -> str:
        names = [name.strip() for name in value.split(',') if name.strip()]
        if len(names) < MIN_PALETTE_SIZE:
            raise ValueError(f'OVERLAY_PALETTE needs at least {MIN_PALETTE_SIZE} colors, got {len(names)}.')
        return value

    @property
    def palette(self) -> tuple[str, ...]:
        return tuple(name.strip() for name in self.overlay_palette.split(',') if name.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
