"""Binary weight files keyed by topology tag.

Layout (the ``writeUTF`` + ``writeDouble`` stream convention):

* the canonical topology tag (``"2-2-1"``) as an unsigned 16-bit big-endian
  byte length followed by the UTF-8 bytes;
* every weight as a big-endian IEEE-754 double, connectivity layer ascending,
  then source unit ascending, then destination unit ascending.

Save and load share that traversal order; it is the only self-description the
format has besides the tag.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

import numpy as np

from ..core.errors import DataShapeError, MismatchError, NetworkIOError
from ..core.network import Network
from ..core.types import Array

logger = logging.getLogger(__name__)

_TAG_LENGTH = struct.Struct(">H")
_WEIGHT_DTYPE = np.dtype(">f8")


def encode_tag(tag: str) -> bytes:
    raw = tag.encode("utf-8")
    if len(raw) > 0xFFFF:
        raise ValueError(f"Topology tag too long to store: {len(raw)} bytes")
    return _TAG_LENGTH.pack(len(raw)) + raw


def decode_tag(payload: bytes) -> tuple[str, int]:
    """Return ``(tag, offset_of_first_weight)`` for a weight-file payload."""

    if len(payload) < _TAG_LENGTH.size:
        raise DataShapeError("Weight file is too short to hold a topology tag")
    (length,) = _TAG_LENGTH.unpack_from(payload, 0)
    end = _TAG_LENGTH.size + length
    if len(payload) < end:
        raise DataShapeError("Weight file ends inside its topology tag")
    try:
        tag = payload[_TAG_LENGTH.size : end].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DataShapeError(f"Weight file topology tag is not valid UTF-8: {exc}") from exc
    return tag, end


def read_weight_file(path: str | Path) -> tuple[str, Array]:
    """Return the tag and the flat big-endian weights stored in ``path``."""

    path = Path(path)
    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise NetworkIOError(f"Unable to read weight file at {path}: {exc}") from exc
    tag, offset = decode_tag(payload)
    body = payload[offset:]
    count = len(body) // _WEIGHT_DTYPE.itemsize
    flat = np.frombuffer(body, dtype=_WEIGHT_DTYPE, count=count).astype(np.float64)
    return tag, flat


def load_weights(network: Network, path: str | Path) -> None:
    """Populate ``network`` from ``path``.

    The whole file is validated before the store is touched, so a failure
    leaves the in-memory weights exactly as they were.
    """

    tag, flat = read_weight_file(path)
    expected_tag = str(network.topology)
    if tag != expected_tag:
        raise MismatchError(
            f"Weight file {path} was saved for topology {tag!r}, "
            f"but the network is configured as {expected_tag!r}"
        )
    needed = network.parameter_count()
    if flat.size < needed:
        raise DataShapeError(
            f"Weight file {path} holds {flat.size} weights; topology {expected_tag} needs {needed}"
        )
    network.set_flat_weights(flat[:needed])
    logger.info("Loaded %d weights for %s from %s", needed, expected_tag, path)


def save_weights(network: Network, path: str | Path) -> str:
    """Write ``network``'s weights to ``path`` and return the path written.

    Bytes already written before an I/O failure are not rolled back.
    """

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            handle.write(encode_tag(str(network.topology)))
            for W in network.weights:
                handle.write(np.ascontiguousarray(W, dtype=_WEIGHT_DTYPE).tobytes(order="C"))
    except OSError as exc:
        raise NetworkIOError(f"Unable to write weight file at {path}: {exc}") from exc
    logger.info("Saved %d weights for %s to %s", network.parameter_count(), network.topology, path)
    return str(path)


__all__ = ["decode_tag", "encode_tag", "load_weights", "read_weight_file", "save_weights"]
