# code_editor/services/ghost.py
from __future__ import annotations
from pathlib import Path
from typing import List

from code_editor.models import FileLocation

GLOBAL_SCOPE = "global"


def bot_scope(bot_id: str) -> str:
    return f"bots/{bot_id}"


class GhostStorage:
    """
    Local-disk ghost storage. Every file lives under GHOST_ROOT:

      <root>/global/<folder>/<filename>        global files
      <root>/bots/<botId>/<folder>/<filename>  bot files
      <root>/<folder>/<filename>               root (raw) files
    """

    def __init__(self, root: Path):
        self.root = root.resolve()

    def _resolve_in_root(self, scope: str, location: FileLocation) -> Path:
        rel = "/".join(p.strip("/") for p in (scope, location.folder, location.filename) if p.strip("/"))
        p = (self.root / rel).resolve()
        # Prevent path traversal / symlink escape
        if p != self.root and self.root not in p.parents:
            raise PermissionError("Path escapes ghost root")
        return p

    def write_text(self, scope: str, location: FileLocation, content: str) -> str:
        p = self._resolve_in_root(scope, location)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return "OK"

    def read_text(self, scope: str, location: FileLocation) -> str:
        p = self._resolve_in_root(scope, location)
        return p.read_text(encoding="utf-8")

    def delete(self, scope: str, location: FileLocation) -> str:
        p = self._resolve_in_root(scope, location)
        p.unlink()
        return "OK"

    def list_files(self, scope: str, folder: str) -> List[str]:
        """Relative paths of every file under `folder`, sorted."""
        base = self._resolve_in_root(scope, FileLocation(folder, ""))
        if not base.is_dir():
            return []
        return sorted(p.relative_to(base).as_posix() for p in base.rglob("*") if p.is_file())
