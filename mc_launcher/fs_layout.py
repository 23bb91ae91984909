from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from .settings import Settings

@dataclass(frozen=True)
class Layout:
    base: Path
    java_dir: Path
    server_dir: Path

def build_layout(settings: Settings) -> Layout:
    base = Path(settings.base_dir)
    return Layout(
        base=base,
        java_dir=base / "java",
        server_dir=base / "server",
    )

def ensure_dirs(layout: Layout) -> None:
    for p in [layout.java_dir, layout.server_dir]:
        p.mkdir(parents=True, exist_ok=True)
