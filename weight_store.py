# weight_store.py
# This module's ONLY job is persistence of the tuple network's weight tables.
#
# File layout (little-endian):
#   uint32 table count
#   per table: uint64 length, then `length` float32 values

import logging
import os
import struct

import numpy as np

logger = logging.getLogger("WeightStore")

_COUNT = struct.Struct('<I')
_LENGTH = struct.Struct('<Q')
_FLOAT = np.dtype('<f4')


class WeightFileError(OSError):
    """A weight file could not be read or written. Not recoverable."""


def _read_exact(f, size, path):
    data = f.read(size)
    if len(data) != size:
        raise WeightFileError(f"truncated weight file: {path}")
    return data


def load_weights(path):
    """Reads every table from `path`. Returns a list of float32 arrays."""
    try:
        with open(path, 'rb') as f:
            (count,) = _COUNT.unpack(_read_exact(f, _COUNT.size, path))
            tables = []
            for _ in range(count):
                (length,) = _LENGTH.unpack(_read_exact(f, _LENGTH.size, path))
                raw = _read_exact(f, length * _FLOAT.itemsize, path)
                tables.append(np.frombuffer(raw, dtype=_FLOAT).astype(np.float32))
    except WeightFileError:
        logger.critical(f"Weight file {path} is corrupt.")
        raise
    except OSError as e:
        logger.critical(f"Cannot open weight file {path}: {e}")
        raise WeightFileError(f"cannot open weight file: {path}") from e
    logger.info(f"Loaded {len(tables)} tables from {path}.")
    return tables


def save_weights(path, tables):
    """Writes `tables` to `path`, replacing any previous content."""
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'wb') as f:
            f.write(_COUNT.pack(len(tables)))
            for table in tables:
                values = np.asarray(table, dtype=_FLOAT)
                f.write(_LENGTH.pack(values.size))
                f.write(values.tobytes())
    except OSError as e:
        logger.critical(f"Cannot write weight file {path}: {e}")
        raise WeightFileError(f"cannot write weight file: {path}") from e
    logger.info(f"Saved {len(tables)} tables to {path}.")
