import base64
import mimetypes
from pathlib import Path
from typing import Optional, Union

MAX_ATTACHMENTS = 5
MAX_ATTACHMENT_BYTES = 5 * 1024 * 1024


def encode_data_url(source: Union[str, Path, bytes], mime_type: Optional[str] = None) -> str:
    """Inline a file as a `data:` URL, the form the backend accepts for attachments."""
    if isinstance(source, bytes):
        content = source
        mime_type = mime_type or "application/octet-stream"
    else:
        path = Path(source)
        content = path.read_bytes()
        mime_type = mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"

    if len(content) > MAX_ATTACHMENT_BYTES:
        raise ValueError(f"File exceeds {MAX_ATTACHMENT_BYTES // (1024 * 1024)}MB limit")

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
