from io import BytesIO

from PIL import Image, UnidentifiedImageError

from leaf_detector.core.errors import LeafDetectorError


def validate_upload(image_bytes: bytes, content_type: str | None, max_bytes: int) -> None:
    if not image_bytes:
        raise LeafDetectorError('MISSING_IMAGE', 'Missing image upload (field name: image).', status_code=400)
    if not (content_type or '').lower().startswith('image/'):
        raise LeafDetectorError(
            'UNSUPPORTED_MEDIA_TYPE',
            'Please upload an image file (JPEG, PNG)',
            status_code=415,
            details={'content_type': content_type},
        )
    if len(image_bytes) > max_bytes:
        raise LeafDetectorError(
            'IMAGE_TOO_LARGE',
            f'Image size should be less than {max_bytes // (1024 * 1024)}MB',
            status_code=413,
        )


def read_image_size(image_bytes: bytes) -> tuple[int, int]:
    # Image.open only parses the header; pixel data is never decoded
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            return image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise LeafDetectorError('IMAGE_DECODE_FAILED', 'Could not read image.', status_code=400) from exc
