class LeafDetectorError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: dict | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class OverlayNotReadyError(LeafDetectorError):
    def __init__(self, message: str = 'Display size is not known yet.', details: dict | None = None):
        super().__init__('OVERLAY_NOT_READY', message, status_code=409, details=details)


class InferenceError(LeafDetectorError):
    def __init__(self, message: str = 'Could not complete detection.', details: dict | None = None):
        super().__init__('INFERENCE_FAILED', message, status_code=502, details=details)


class KnowledgeBaseError(LeafDetectorError):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__('KNOWLEDGE_BASE_INVALID', message, status_code=500, details=details)


class SessionStateError(LeafDetectorError):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__('INVALID_SESSION_STATE', message, status_code=409, details=details)
