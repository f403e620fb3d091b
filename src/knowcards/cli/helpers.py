"""Shared CLI helpers."""

import os
import shlex
import subprocess
import tempfile

from rich.console import Console

from knowcards.core import config
from knowcards.core.storage import CardStore

console = Console()

# Global store instance (initialized lazily)
_store: CardStore | None = None


def get_store() -> CardStore:
    """Get or create the store instance."""
    global _store
    if _store is None:
        _store = CardStore(config.data_file())
    return _store


def _editor_cmd() -> list[str]:
    """Build the editor command, adding --wait for GUI editors that need it."""
    raw = os.environ.get("EDITOR", os.environ.get("VISUAL", "vim"))
    cmd = shlex.split(raw)
    # GUI editors that return immediately without --wait
    gui_editors = {"code", "code-insiders", "subl", "atom", "zed"}
    if cmd and cmd[0] in gui_editors and "--wait" not in cmd and "-w" not in cmd:
        cmd.append("--wait")
    return cmd


def open_in_editor(content: str, suffix: str = ".json") -> str:
    """Open content in the user's editor and return the edited content."""
    cmd = _editor_cmd()

    with tempfile.NamedTemporaryFile(
        mode="w", suffix=suffix, delete=False, encoding="utf-8"
    ) as f:
        f.write(content)
        f.flush()
        temp_path = f.name

    try:
        subprocess.run([*cmd, temp_path], check=True)
        with open(temp_path, encoding="utf-8") as f:
            return f.read()
    finally:
        os.unlink(temp_path)
