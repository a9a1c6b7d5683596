from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

"""Byte sink/source handling shared by the codecs.

Codecs accept either a filesystem path or an already opened binary file
object. In both cases the codec owns the handle for the duration of the call
and closes it on every exit path.
"""

__all__ = [
    "ByteSink",
    "ByteSource",
    "open_sink",
    "open_source",
]

ByteSink = str | os.PathLike[str] | BinaryIO
ByteSource = str | os.PathLike[str] | BinaryIO


@contextmanager
def open_sink(output: ByteSink) -> Iterator[BinaryIO]:
    if isinstance(output, (str, os.PathLike)):
        with open(output, "wb") as f:
            yield f
        return
    try:
        yield output
    finally:
        output.close()


@contextmanager
def open_source(source: ByteSource) -> Iterator[BinaryIO]:
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            yield f
        return
    try:
        yield source
    finally:
        source.close()
