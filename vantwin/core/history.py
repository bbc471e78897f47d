"""In-memory per-frame record of the panel (tank levels, heater status) with CSV export."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np


class TwinHistory:
    """
    Buffer of per-frame values keyed by name.
    Each append() is one frame; keys may be scalars, strings or arrays.
    """

    def __init__(self, max_length: Optional[int] = None) -> None:
        """
        Args:
            max_length: number of frames to keep (None = unbounded).
        """
        if max_length is not None and max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self._max_length = max_length
        self._data: Dict[str, List[Any]] = {}
        self._frames = 0

    def append(self, **values: Any) -> None:
        """Record one frame (key -> value)."""
        for key, value in values.items():
            self._data.setdefault(key, []).append(value)
        self._frames += 1
        if self._max_length is not None and self._frames > self._max_length:
            for key in self._data:
                self._data[key] = self._data[key][-self._max_length:]
            self._frames = self._max_length

    def clear(self) -> None:
        self._data.clear()
        self._frames = 0

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def get(self, key: str) -> np.ndarray:
        """Series for a key as a numpy array (empty if the key was never recorded)."""
        if key not in self._data:
            return np.array([])
        return np.array(self._data[key])

    def last(self, key: str, default: Any = None) -> Any:
        series = self._data.get(key)
        return series[-1] if series else default

    def to_dict(self) -> Dict[str, np.ndarray]:
        return {k: self.get(k) for k in self._data}

    def to_csv(
        self,
        path: Union[str, Path],
        keys: Optional[List[str]] = None,
        delimiter: str = ",",
    ) -> None:
        """
        Export to CSV: one column per key, one row per frame.
        Array values are written as space-separated numbers in one cell.
        """
        path = Path(path)
        keys = keys or self.keys()
        if not keys:
            path.write_text("")
            return
        series = [self._data.get(k, []) for k in keys]
        n = max(len(s) for s in series)
        rows = []
        for i in range(n):
            row = []
            for s in series:
                if i >= len(s):
                    row.append("")
                    continue
                v = s[i]
                if isinstance(v, (list, tuple, np.ndarray)):
                    row.append(" ".join(f"{float(x):g}" for x in np.ravel(v)))
                else:
                    row.append(str(v))
            rows.append(delimiter.join(row))
        path.write_text(delimiter.join(keys) + "\n" + "\n".join(rows), encoding="utf-8")

    def __len__(self) -> int:
        return self._frames
