"""
Reading and writing per-chunk coverage files.

When coverage is split in chunks upstream, each chunk lives in its own
file ``<directory>/<prefix><key>.<ext>``. Sparse chunks are stored as
SciPy ``.npz`` files, anything else (CoverageTable, DataFrame, ndarray)
as a pandas pickle. Loaders are stateless, so parallel workers can each
read their own chunk without coordination.
"""

from pathlib import Path
from typing import Any, Callable, Hashable, Union

import pandas as pd
from scipy import sparse


ChunkLoader = Callable[[Hashable], Any]

CHUNK_EXTENSIONS = ('.pkl', '.npz')


class DirectoryChunkLoader:
    """
    Load chunk `key` from ``directory/<prefix><key>.pkl`` or ``.npz``.

    Parameters
    ----------
    directory : str or Path
        Directory holding the chunk files.
    prefix : str
        File name prefix.
    """

    def __init__(self, directory: Union[str, Path], prefix: str = "chunk"):
        self.directory = Path(directory)
        self.prefix = prefix

    def path_for(self, key: Hashable) -> Path:
        for ext in CHUNK_EXTENSIONS:
            path = self.directory / f"{self.prefix}{key}{ext}"
            if path.exists():
                return path
        raise FileNotFoundError(
            f"No chunk file for key {key!r} in {self.directory} "
            f"(looked for {self.prefix}{key}{{{','.join(CHUNK_EXTENSIONS)}}})"
        )

    def __call__(self, key: Hashable):
        path = self.path_for(key)
        if path.suffix == '.npz':
            return sparse.load_npz(path).tocsc()
        return pd.read_pickle(path)

    def __repr__(self):
        return f"DirectoryChunkLoader({str(self.directory)!r}, prefix={self.prefix!r})"


def save_chunk(data, directory: Union[str, Path], key: Hashable,
               prefix: str = "chunk") -> Path:
    """Write one chunk where `DirectoryChunkLoader` will find it."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    if sparse.issparse(data):
        path = directory / f"{prefix}{key}.npz"
        sparse.save_npz(path, sparse.csc_matrix(data))
    else:
        path = directory / f"{prefix}{key}.pkl"
        pd.to_pickle(data, path)
    return path


__all__ = ["ChunkLoader", "DirectoryChunkLoader", "save_chunk"]
