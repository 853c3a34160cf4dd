"""External editor integration for the depgraph CLI.

Opens the current graph query in the user's preferred editor ($EDITOR) so
it can be tweaked before being re-run.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from depgraph.config import settings
from cli.context import load_context


def get_editor_command() -> str:
    """Determine the editor command to use."""
    ctx = load_context()

    # 1. User preference from context.json
    if "editor" in ctx.user_preferences:
        return ctx.user_preferences["editor"]

    # 2. Environment variable
    if "EDITOR" in os.environ:
        return os.environ["EDITOR"]

    # 3. Platform defaults
    if os.name == "nt":  # Windows
        if shutil.which("code"):
            return "code -w"
        return "notepad"
    if shutil.which("vim"):
        return "vim"
    if shutil.which("nano"):
        return "nano"
    return "vi"


def _open_editor(path: Path) -> int:
    # Shell=True to handle spaces in command (e.g. "code -w")
    return subprocess.call(f'{get_editor_command()} "{path}"', shell=True)


def edit_query_text(text: str) -> Optional[str]:
    """Open *text* in an external editor.

    Returns the edited query, or None if the editor failed or nothing changed.
    """
    drafts_dir = settings.cli_config_dir / "drafts"
    drafts_dir.mkdir(parents=True, exist_ok=True)

    draft_file = drafts_dir / "query.cypher"
    draft_file.write_text(text, encoding="utf-8")

    ret = _open_editor(draft_file)
    if ret != 0:
        print(f"⚠️ Editor exited with code {ret}")
        return None

    edited = draft_file.read_text(encoding="utf-8")
    if edited.strip() == text.strip():
        return None
    return edited
