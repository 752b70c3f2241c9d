"""Vector serialization utilities for sqlite-vec."""

import numpy as np


def serialize_vector(vector: np.ndarray | list[float]) -> bytes:
    """
    Serialize a vector to bytes for storage in SQLite.

    Args:
        vector: Numpy array or list of floats

    Returns:
        Bytes representation of vector as float32
    """
    if isinstance(vector, list):
        vector = np.array(vector, dtype=np.float32)
    elif vector.dtype != np.float32:
        vector = vector.astype(np.float32)
    return vector.tobytes()


def deserialize_vector(blob: bytes) -> list[float]:
    """Inverse of serialize_vector."""
    return np.frombuffer(blob, dtype=np.float32).tolist()


def normalize_vector(vector: np.ndarray | list[float]) -> list[float]:
    """
    L2-normalize a vector.

    A zero vector is returned unchanged.
    """
    array = np.asarray(vector, dtype=np.float32)
    norm = float(np.linalg.norm(array))
    if norm == 0.0:
        return array.tolist()
    return (array / norm).tolist()


def is_valid_embedding(vector: list[float] | None, dimension: int) -> bool:
    """Check that a vector has the expected dimension and only finite values."""
    if vector is None or len(vector) != dimension:
        return False
    try:
        array = np.asarray(vector, dtype=np.float32)
    except (TypeError, ValueError):
        return False
    return bool(np.isfinite(array).all())
