"""Input validation for image bytes.

The content type is sniffed from magic bytes only; file names and declared
types are never trusted.
"""

from .error_handling import InvalidInputError

GIF_MIME_TYPE = "image/gif"

# (signature, MIME type), checked in order against the start of the data.
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"GIF87a", GIF_MIME_TYPE),
    (b"GIF89a", GIF_MIME_TYPE),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"BM", "image/bmp"),
    (b"II\x2a\x00", "image/tiff"),
    (b"MM\x00\x2a", "image/tiff"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
)


def sniff_mime_type(data: bytes) -> str | None:
    """Return the image MIME type implied by *data*'s signature, or None."""
    if not data:
        return None
    head = bytes(data[:16])
    for signature, mime_type in _SIGNATURES:
        if head.startswith(signature):
            return mime_type
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    return None


def require_gif(data: bytes | None) -> bytes:
    """Validate that *data* is non-empty GIF content and return it as bytes.

    Raises:
        InvalidInputError: If *data* is None, empty or not a GIF
    """
    if data is None:
        raise InvalidInputError("Image data must not be empty")
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidInputError(f"Image data must be bytes, got {type(data).__name__}")
    if len(data) == 0:
        raise InvalidInputError("Image data must not be empty")

    mime_type = sniff_mime_type(data)
    if mime_type != GIF_MIME_TYPE:
        raise InvalidInputError(
            "Only GIF images are supported",
            context={"detected_type": mime_type or "unknown", "head": bytes(data[:8]).hex()},
        )
    return bytes(data)
