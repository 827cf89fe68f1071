import base64
import binascii
import re
from dataclasses import dataclass

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<payload>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class DataUri:
    mime_type: str
    payload: str


def parse_data_uri(value: str) -> DataUri:
    """Split a ``data:<mime>;base64,<payload>`` string.

    Raises ValueError when the MIME type or base64 marker is missing, or when
    the payload is empty or not valid base64. The payload itself is not decoded
    further; it is passed through to the upload service as-is.
    """
    match = _DATA_URI_RE.match(value.strip())
    if not match:
        raise ValueError("must be a base64 data URI with a MIME type (data:<mime>;base64,<data>)")

    payload = re.sub(r"\s+", "", match.group("payload"))
    if not payload:
        raise ValueError("data URI payload is empty")
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("data URI payload is not valid base64") from e

    return DataUri(mime_type=match.group("mime").lower(), payload=payload)

