"""
sources.py - Read builder inputs exactly once.

A source may be literal content (bytes or str), a filesystem path, or an
open file-like object. Paths are opened and closed here; file-like objects
are read once and closed afterwards whether or not the read succeeded.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Optional, Union

from .errors import ProjectIOError, ValidationError

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, str, Path, IO[bytes], IO[str]]


def read_source(source: Source, name: Optional[str] = None) -> bytes:
    """
    Consume a source and return its raw bytes.

    A ``str`` is literal content, never a file name; pass a ``Path`` to
    read from disk.

    Args:
        source: Content, path, or readable stream
        name: Optional label used in error messages

    Returns:
        The payload as bytes (text is encoded as UTF-8).

    Raises:
        ProjectIOError: If the source cannot be read
        ValidationError: If the source type is not supported
    """
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, str):
        return source.encode("utf-8")

    if isinstance(source, Path):
        try:
            with open(source, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ProjectIOError(f"Cannot read {name or 'input'}: {e}", source) from e
        logger.debug("Read %d bytes from %s", len(data), source)
        return data

    if hasattr(source, "read"):
        label = name or getattr(source, "name", None)
        try:
            data = source.read()
        except (OSError, ValueError) as e:
            raise ProjectIOError(f"Cannot read {label or 'input stream'}: {e}") from e
        finally:
            close = getattr(source, "close", None)
            if close is not None:
                close()
        if isinstance(data, str):
            data = data.encode("utf-8")
        logger.debug("Read %d bytes from stream %s", len(data), label)
        return bytes(data)

    raise ValidationError(
        f"Unsupported source type for {name or 'input'}: {type(source).__name__}"
    )


def decode_text(payload: bytes, name: Optional[str] = None) -> str:
    """Decode a UTF-8 payload (tolerating a BOM) or raise ValidationError."""
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError(f"{name or 'input'} is not valid UTF-8 text: {e}") from e
