from __future__ import annotations

import shutil
from pathlib import Path


def sync_images(source_dir: Path, dest_dir: Path) -> list[str]:
    if not source_dir.is_dir():
        return []
    dest_dir.mkdir(parents=True, exist_ok=True)
    copied = []
    for item in sorted(source_dir.iterdir(), key=lambda p: p.name):
        if not item.is_file():
            continue
        shutil.copy2(item, dest_dir / item.name)
        copied.append(item.name)
    return copied
