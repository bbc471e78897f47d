"""Save and load panel configuration (JSON) and surface snapshots (npz + JSON)."""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np


def to_jsonable(value: Any) -> Any:
    """Recursively convert numpy values and enums to plain JSON types."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, np.integer):
        return int(value)
    return value


def save_config(config: Dict[str, Any], path: Union[str, Path]) -> None:
    """Write a configuration dict to JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_jsonable(config), f, indent=2, ensure_ascii=False)


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def save_snapshot(state_dict: Dict[str, Any], path: Union[str, Path]) -> None:
    """
    Save a component state_dict: arrays to <path>.npz, everything else to
    <path>.meta.json. Nested dicts are flattened with '.' separated keys.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    arrays: Dict[str, np.ndarray] = {}
    meta: Dict[str, Any] = {}

    def split(prefix: str, d: Dict[str, Any]) -> None:
        for k, v in d.items():
            key = f"{prefix}{k}"
            if isinstance(v, np.ndarray):
                arrays[key] = v
            elif isinstance(v, dict):
                split(key + ".", v)
            else:
                meta[key] = v

    split("", state_dict)
    np.savez(path.with_suffix(".npz"), **arrays)
    save_config(meta, path.with_suffix(".meta.json"))


def load_snapshot(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a snapshot written by save_snapshot() as a flat dict."""
    path = Path(path)
    with np.load(path.with_suffix(".npz")) as npz:
        data: Dict[str, Any] = {k: npz[k] for k in npz.files}
    meta_path = path.with_suffix(".meta.json")
    if meta_path.exists():
        data.update(load_config(meta_path))
    return data
