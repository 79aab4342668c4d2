"""Gemfile.lock scanning."""

import re
from pathlib import Path
from typing import List

from match_step.config import settings
from match_step.errors import FilesystemAccessError
from match_step.models import LockEntry


SPECS_MARKER = "specs:"
ENTRY_PATTERN = re.compile(r"^(\S+) \((.+)\)")


def lockfile_path_for(gemfile_path: str) -> Path:
    """Return the Gemfile.lock that sits next to a Gemfile."""
    return Path(gemfile_path).parent / settings.lockfile_name


def specs_block(content: str) -> List[str]:
    """
    Extract the trimmed lines of the first specs block.

    The block starts after the first ``specs:`` line and ends at the first
    blank line that follows it.
    """
    lines = []
    in_specs = False

    for line in content.splitlines():
        trimmed = line.strip()
        if not in_specs:
            if trimmed == SPECS_MARKER:
                in_specs = True
            continue

        if not trimmed:
            break
        lines.append(trimmed)

    return lines


def parse_lock_entries(content: str) -> List[LockEntry]:
    """List every ``name (version)`` line of the specs block."""
    entries = []
    for line in specs_block(content):
        match = ENTRY_PATTERN.match(line)
        if match:
            entries.append(LockEntry(name=match.group(1), version=match.group(2)))
    return entries


def gem_version_from_lock_content(gem: str, content: str) -> str:
    """Return the version pinned for ``gem``, or an empty string."""
    for entry in parse_lock_entries(content):
        if entry.name == gem:
            return entry.version
    return ""


def gem_version_from_lock(gem: str, lockfile_path: Path) -> str:
    """Read a Gemfile.lock and return the version pinned for ``gem``."""
    try:
        content = Path(lockfile_path).read_text()
    except OSError as e:
        raise FilesystemAccessError(str(lockfile_path), e) from e
    return gem_version_from_lock_content(gem, content)
