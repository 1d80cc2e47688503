from __future__ import annotations

import re

from .errors import InvalidPathError


_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def norm_path(p: str) -> str:
    """Normalize an archive entry path to a canonical forward-slash form.

    Rules:
    - Reject NUL bytes
    - Reject absolute paths (leading '/' or '\\', or a drive letter)
    - Convert backslashes to slashes
    - Remove empty and '.' segments
    - Fold 'a/../b' to 'b'; reject '..' that climbs above the archive root
    - Reject paths that are empty once normalized
    """
    if not isinstance(p, str):
        raise InvalidPathError("Path must be a string")
    if "\x00" in p:
        # zipfile truncates names at NUL, which would smuggle '..' past the checks
        raise InvalidPathError(f"NUL byte in path: {p!r}")
    if p.startswith(("/", "\\")) or _DRIVE_RE.match(p):
        raise InvalidPathError(f"Absolute path not allowed: {p!r}")
    parts: list[str] = []
    for q in p.replace("\\", "/").split("/"):
        if q in ("", "."):
            continue
        if q == "..":
            if not parts:
                raise InvalidPathError(f"Path escapes archive root: {p!r}")
            parts.pop()
            continue
        parts.append(q)
    if not parts:
        raise InvalidPathError(f"Empty path: {p!r}")
    return "/".join(parts)


def is_safe_path(p: str) -> bool:
    try:
        norm_path(p)
    except InvalidPathError:
        return False
    return True
