import logging

_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logging(level: str = 'INFO') -> None:
    root = logging.getLogger()
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    root.setLevel(resolved)

    # uvicorn or pytest may already have installed handlers
    if any(getattr(handler, '_leaf_detector', False) for handler in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._leaf_detector = True  # type: ignore[attr-defined]
    root.addHandler(handler)
