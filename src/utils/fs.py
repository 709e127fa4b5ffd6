"""File output for exported frames and YAML configs.

Every write goes to a sibling tmp file first and is renamed into place, so
a crash or a concurrent reader never sees a half-written PNG or config.
The painting sessions themselves never touch the disk; only the config
loaders and scripts/replay_session.py do.

Usage:
    from src.utils import fs

    cfg = fs.load_yaml("configs/tools.v1.yaml")
    name = fs.timestamped_filename("IMG")        # IMG_2026-10-19_13-45-12_345.png
    fs.atomic_save_image(tool.export_frame(), out_dir / name)
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from PIL import Image

PathLike = Union[str, Path]


def ensure_dir(p: PathLike) -> Path:
    """mkdir -p; returns the directory as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def _discard(tmp: Path) -> None:
    if tmp.exists():
        tmp.unlink()


def atomic_write_bytes(path: PathLike, data: bytes, tmp_suffix: str = ".tmp") -> None:
    """Write ``data`` to ``path`` via fsync'd tmp file + rename.

    Raises
    ------
    RuntimeError
        Wrapping the OSError if any step fails; the tmp file is removed
    """
    path = Path(path)
    ensure_dir(path.parent)
    tmp = path.with_name(path.name + tmp_suffix)
    try:
        with open(tmp, 'wb') as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    except OSError as e:
        _discard(tmp)
        raise RuntimeError(f"Could not write {path}: {e}") from e


def atomic_save_image(
    img: np.ndarray,
    path: PathLike,
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> None:
    """Save an RGB(A) frame through Pillow, atomically.

    Parameters
    ----------
    img : np.ndarray
        (H, W, 3) or (H, W, 4); uint8 as exported, or float in [0,1]
    path : str or Path
        Destination; the suffix picks the format
    pil_kwargs : dict, optional
        Forwarded to ``Image.save`` (e.g. ``compress_level=9``)

    Raises
    ------
    ValueError
        If the array isn't (H, W, 3|4)
    RuntimeError
        If Pillow fails to write the file
    """
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3|4) image, got shape {img.shape}")
    if img.dtype != np.uint8:
        img = (np.clip(img, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)

    path = Path(path)
    ensure_dir(path.parent)
    # Suffix stays last so Pillow can still infer the format from the tmp name
    tmp = path.with_name(f"{path.stem}.tmp{path.suffix}")
    try:
        Image.fromarray(np.ascontiguousarray(img)).save(tmp, **(pil_kwargs or {}))
        os.replace(tmp, path)
    except (OSError, ValueError) as e:
        _discard(tmp)
        raise RuntimeError(f"Could not save image {path}: {e}") from e


def atomic_yaml_dump(obj: Any, path: PathLike) -> None:
    """Write ``obj`` as block-style YAML, keys in insertion order."""
    text = yaml.safe_dump(obj, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write_bytes(path, text.encode('utf-8'))


def load_yaml(path: PathLike) -> Dict[str, Any]:
    """Parse a YAML file with safe_load; an empty file gives ``{}``.

    Raises
    ------
    FileNotFoundError
        If the file is missing
    yaml.YAMLError
        On malformed YAML, with the path in the message
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path, 'r', encoding='utf-8') as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Malformed YAML in {path}: {e}") from e


def timestamped_filename(prefix: str, now: Optional[datetime] = None, ext: str = "png") -> str:
    """Sortable export filename using each tool's save prefix.

    ``DOT`` (calligraphy) uses epoch milliseconds, ``DOT_1760880000000.png``;
    any other prefix gets zero-padded local date and time plus the
    millisecond within the second, ``IMG_2026-10-19_13-45-12_345.png``.
    """
    now = now or datetime.now()
    if prefix == "DOT":
        return f"{prefix}_{int(now.timestamp() * 1000)}.{ext}"
    return f"{prefix}_{now:%Y-%m-%d_%H-%M-%S}_{now.microsecond // 1000:03d}.{ext}"
