"""Image payload helpers."""

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field

from grail_scanner.errors import InvalidImageError

_DEFAULT_MIME_TYPE = "image/jpeg"

_MAGIC_NUMBERS: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF8", "image/gif"),
)


class ImagePayload(BaseModel):
    """Raw image bytes plus their MIME type."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = _DEFAULT_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


def sniff_mime_type(data: bytes) -> str | None:
    """Guess the MIME type from the leading bytes."""
    for magic, mime_type in _MAGIC_NUMBERS:
        if data.startswith(magic):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def image_from_bytes(data: bytes, mime_type: str | None = None) -> ImagePayload:
    """
    Build a payload from raw upload bytes.

    Args:
        data: Raw image bytes
        mime_type: Encoding hint from the client; sniffed from ``data`` when missing
            or generic

    Returns:
        ImagePayload
    """
    if not data:
        raise InvalidImageError("Image payload is empty")
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = sniff_mime_type(data) or _DEFAULT_MIME_TYPE
    return ImagePayload(data=data, mime_type=mime_type)


def image_from_base64(encoded: str) -> ImagePayload:
    """Build a payload from a base64 string or a ``data:`` URL.

    A ``data:`` prefix is stripped. The MIME type is sniffed from the decoded
    bytes; when that fails it is PNG if the prefix says so and JPEG otherwise.
    """
    header, sep, body = encoded.partition(",")
    if not sep:
        header, body = "", encoded
    try:
        data = base64.b64decode(body.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(f"Image payload is not valid base64: {e}") from e
    if not data:
        raise InvalidImageError("Image payload is empty")
    declared = "image/png" if "image/png" in header else _DEFAULT_MIME_TYPE
    return ImagePayload(data=data, mime_type=sniff_mime_type(data) or declared)
