"""Path validation for the filesystem tools.

Every tool turns the untrusted path it receives into a ValidatedPath through
validate() before touching the filesystem. A ValidatedPath is canonical
(symlink-free, absolute), exists, is outside the denylist and, when a base was
required, inside that base.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import AccessDeniedError, NotFoundError, TraversalDeniedError

__all__ = [
    "ValidatedPath",
    "validate",
    "denied_segments",
    "POSIX_DENIED_SEGMENTS",
    "WINDOWS_DENIED_SEGMENTS",
]

logger = logging.getLogger(__name__)

# Substrings of a canonical path that must never be reachable. Matched
# case-sensitively against str(path).
POSIX_DENIED_SEGMENTS: tuple[str, ...] = (
    # OS credential stores
    "/etc/shadow",
    "/etc/gshadow",
    "/etc/sudoers",
    "/etc/ssl/private",
    "/Library/Keychains",
    # System package directories
    "/usr/lib",
    "/usr/local/lib",
    "/System/Library",
    # SSH / GPG / cloud credentials
    "/.ssh",
    "/.gnupg",
    "/.aws",
    "/.azure",
    "/.config/gcloud",
    "/.kube",
    "/.docker",
    "credentials",
)

WINDOWS_DENIED_SEGMENTS: tuple[str, ...] = (
    "\\Windows\\System32\\config",
    "\\AppData\\Roaming\\Microsoft\\Credentials",
    "\\AppData\\Local\\Microsoft\\Credentials",
    "\\AppData\\Roaming\\Microsoft\\Protect",
    "\\Program Files",
    "\\ProgramData\\Microsoft\\Crypto",
    "\\.ssh",
    "\\.gnupg",
    "\\.aws",
    "\\.azure",
    "\\.kube",
    "\\.docker",
    "credentials",
)

# Only validate() holds this; see ValidatedPath.__post_init__.
_CONSTRUCTION_KEY = object()


def denied_segments(
    platform: str | None = None, extra: Iterable[str] = ()
) -> tuple[str, ...]:
    """Return the denylist for a platform (defaults to the running one) plus extra."""
    platform_name = sys.platform if platform is None else platform
    base = (
        WINDOWS_DENIED_SEGMENTS
        if platform_name.startswith("win")
        else POSIX_DENIED_SEGMENTS
    )
    return base + tuple(s for s in extra if s)


@dataclass(frozen=True)
class ValidatedPath:
    """A canonical path that passed validate().

    Cannot be built directly; downstream code accepts this type so no component
    re-validates or skips validation.
    """

    path: Path
    _key: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._key is not _CONSTRUCTION_KEY:
            raise TypeError("ValidatedPath can only be created by validate()")

    def __str__(self) -> str:
        return str(self.path)

    def __fspath__(self) -> str:
        return str(self.path)

    @property
    def name(self) -> str:
        return self.path.name

    def is_dir(self) -> bool:
        return self.path.is_dir()

    def is_file(self) -> bool:
        return self.path.is_file()


def _is_within(path: Path, base: Path) -> bool:
    return path == base or path.is_relative_to(base)


def _deny(error: type[Exception], message: str, path: object) -> Exception:
    logger.warning("%s: %s", message, path)
    return error(f"{message}: {path}")


def validate(
    raw_path: str,
    required_base: ValidatedPath | None = None,
    extra_denied: Iterable[str] = (),
) -> ValidatedPath:
    """Canonicalize raw_path and check it against the denylist and base.

    Args:
        raw_path: Untrusted path, absolute or relative. Relative paths resolve
            against required_base when given, else the working directory.
        required_base: Optional root the result must stay inside.
        extra_denied: Segments denied in addition to the platform denylist.

    Returns:
        ValidatedPath for the canonical path.

    Raises:
        NotFoundError: The entry does not exist or cannot be canonicalized
            (including paths with an embedded NUL byte).
        AccessDeniedError: The canonical path contains a denylisted segment.
        TraversalDeniedError: The path escapes required_base.
    """
    candidate = Path(os.path.expanduser(raw_path))
    if not candidate.is_absolute():
        anchor = required_base.path if required_base is not None else Path.cwd()
        candidate = anchor / candidate

    try:
        canonical = candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        lexical = Path(os.path.normpath(candidate))
        if required_base is not None and not _is_within(lexical, required_base.path):
            raise _deny(TraversalDeniedError, "Path escapes project root", lexical)
        raise NotFoundError(f"Path does not exist: {raw_path}") from None

    text = str(canonical)
    for segment in denied_segments(extra=extra_denied):
        if segment in text:
            raise _deny(AccessDeniedError, "Access to sensitive path denied", canonical)

    if required_base is not None and not _is_within(canonical, required_base.path):
        raise _deny(TraversalDeniedError, "Path escapes project root", canonical)

    return ValidatedPath(canonical, _CONSTRUCTION_KEY)
