"""Writing encoded graphs to files and streams."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Union

from ..errors import SinkWriteError

logger = logging.getLogger(__name__)

Destination = Union[str, Path, BinaryIO]


def _describe(destination: Destination) -> str:
    if isinstance(destination, (str, Path)):
        return str(destination)
    return str(getattr(destination, "name", repr(destination)))


def _release(stream: BinaryIO, owned: bool):
    try:
        stream.flush()
    finally:
        if owned:
            stream.close()


@contextmanager
def open_sink(destination: Destination) -> Iterator[BinaryIO]:
    """Open ``destination`` for binary writing.

    Paths are opened here and always flushed and closed on exit. Streams
    belong to the caller: they are flushed but left open.

    Raises:
        SinkWriteError: If the destination cannot be opened, flushed or closed.
    """
    label = _describe(destination)
    if isinstance(destination, (str, Path)):
        try:
            stream = open(destination, "wb")
        except OSError as e:
            raise SinkWriteError(label, e.strerror or str(e)) from e
        owned = True
    else:
        stream, owned = destination, False

    try:
        yield stream
    except BaseException:
        try:
            _release(stream, owned)
        except OSError as e:
            logger.debug("Error releasing %s after failure: %s", label, e)
        raise

    try:
        _release(stream, owned)
    except OSError as e:
        raise SinkWriteError(label, e.strerror or str(e)) from e


def write_graph(chunks: Iterable[bytes], destination: Destination) -> None:
    """Write encoded graph chunks to ``destination``.

    Errors raised while producing chunks propagate unchanged; the
    destination is still released. Partially written output is left as is.
    """
    label = _describe(destination)
    with open_sink(destination) as sink:
        for chunk in chunks:
            try:
                sink.write(chunk)
            except OSError as e:
                raise SinkWriteError(label, e.strerror or str(e)) from e
