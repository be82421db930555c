"""
Workspace ignore file.

``.linesentryignore`` lives at the workspace root and lists issues to skip,
one per line::

    RULE_CODE path/to/file.ts[:line] [# reason]

Line numbers are 1-based; an entry without a line covers the whole file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

IGNORE_FILENAME = ".linesentryignore"

FILE_HEADER = """# linesentry ignore file
# Format: RULE_CODE file/path.ts:line # optional reason
# Lines starting with # are comments
"""


@dataclass(frozen=True)
class IgnoreEntry:
    rule_code: str
    file_path: str
    line: Optional[int] = None
    reason: Optional[str] = None

    def to_line(self) -> str:
        path = self.file_path.replace("\\", "/")
        text = f"{self.rule_code} {path}"
        if self.line is not None:
            text += f":{self.line}"
        if self.reason:
            text += f" # {self.reason}"
        return text


def parse_ignore_line(line: str) -> Optional[IgnoreEntry]:
    """Parse one entry; returns None for blank lines, comments and malformed entries."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    main, _, reason = line.partition("#")
    parts = main.split()
    if len(parts) < 2:
        return None

    rule_code, file_spec = parts[0], parts[1]
    file_path, line_number = file_spec, None
    head, sep, tail = file_spec.rpartition(":")
    if sep and tail.isdigit() and int(tail) > 0:
        file_path, line_number = head, int(tail)

    return IgnoreEntry(
        rule_code=rule_code,
        file_path=file_path.replace("\\", "/"),
        line=line_number,
        reason=reason.strip() or None,
    )


def load_ignore_file(workspace_root: Union[str, Path]) -> List[IgnoreEntry]:
    """Read ``.linesentryignore`` from ``workspace_root``; empty if absent."""
    path = Path(workspace_root) / IGNORE_FILENAME
    if not path.exists():
        return []

    entries = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        entry = parse_ignore_line(raw)
        if entry:
            entries.append(entry)
    return entries


def append_ignore_entry(workspace_root: Union[str, Path], entry: IgnoreEntry) -> Path:
    """Append ``entry``, creating the file with a header when needed."""
    path = Path(workspace_root) / IGNORE_FILENAME
    if not path.exists():
        path.write_text(FILE_HEADER + "\n" + entry.to_line() + "\n", encoding="utf-8")
        return path

    existing = path.read_text(encoding="utf-8")
    separator = "" if existing.endswith("\n") or not existing else "\n"
    with path.open("a", encoding="utf-8") as f:
        f.write(separator + entry.to_line() + "\n")
    return path


def is_ignored(
    entries: List[IgnoreEntry],
    rule_code: str,
    relative_path: str,
    issue_line: Optional[int] = None,
) -> bool:
    """
    Check whether an issue is covered by an entry.

    ``issue_line`` is 0-based, entry lines are 1-based.
    """
    normalized = relative_path.replace("\\", "/")
    for entry in entries:
        if entry.rule_code != rule_code or entry.file_path != normalized:
            continue
        if entry.line is not None and issue_line is not None and entry.line != issue_line + 1:
            continue
        return True
    return False
