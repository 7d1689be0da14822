"""
Media model - photos and generated media as self-contained data URIs.

Every payload that crosses the system boundary is a string of the form
``data:<mimetype>;base64,<payload>``. PhotoAsset is the decoded form of an
uploaded (or generated) image.
"""

import base64
import binascii
import re
from dataclasses import dataclass

from agent.errors import ValidationError

DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime_type>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<payload>.*)$",
    re.DOTALL,
)


def parse_data_uri(data_uri: str) -> tuple[str, bytes]:
    """
    Split a data URI into (mime_type, raw bytes).

    Raises ValidationError unless the URI carries both a MIME type and a
    non-empty base64 payload.
    """
    if not isinstance(data_uri, str):
        raise ValidationError("Media must be provided as a data URI.")

    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise ValidationError("Media must be a base64 data URI with a MIME type.")

    payload = re.sub(r"\s+", "", match.group("payload"))
    if not payload:
        raise ValidationError("Media data URI has an empty payload.")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Media data URI payload is not valid base64.")

    return match.group("mime_type").lower(), data


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@dataclass(frozen=True)
class PhotoAsset:
    """
    An uploaded or generated image.

    Created on file selection (or from a synthesized image), discarded on
    reset. Never holds anything but a decoded image payload.
    """

    mime_type: str
    data: bytes

    @classmethod
    def from_data_uri(cls, data_uri: str) -> "PhotoAsset":
        """Decode and validate a photo data URI."""
        mime_type, data = parse_data_uri(data_uri)
        if not mime_type.startswith("image/"):
            raise ValidationError(f"Expected an image, got '{mime_type}'.")
        return cls(mime_type=mime_type, data=data)

    @property
    def data_uri(self) -> str:
        return encode_data_uri(self.data, self.mime_type)

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"PhotoAsset(mime_type={self.mime_type!r}, size_bytes={self.size_bytes})"
