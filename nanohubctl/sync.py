"""Synchronise a directory of declarations and set files with the server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

from nanohubctl.client import NanoHubClient
from nanohubctl.declarations import create_declarations
from nanohubctl.sets import SetResult, add_to_set

PathLike = Union[str, Path]


@dataclass
class SyncFiles:
    """Declaration JSON files and set files found in a directory."""

    declarations: List[Path] = field(default_factory=list)
    sets: List[Path] = field(default_factory=list)


def set_name_from_path(path: PathLike) -> str:
    """Derive a normalised set name from a ``set.<name>.txt`` file path."""
    name = os.path.basename(str(path)).strip()
    name = name.removeprefix("set.").removesuffix(".txt")
    return name.lower()


def _walk(path: Path) -> Iterator[Path]:
    """Yield every non-directory below ``path`` in lexical order."""
    if path.is_symlink() or not path.is_dir():
        yield path
        return
    with os.scandir(path) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        yield from _walk(Path(entry.path))


def collect_sync_files(directory: PathLike) -> SyncFiles:
    """Find declaration ``.json`` files and ``set*.txt`` files under ``directory``."""
    root = Path(directory)
    if not os.path.exists(root):
        raise FileNotFoundError(f"directory {directory} does not exist")
    found = SyncFiles()
    for path in _walk(root):
        text = str(path)
        if text.lower().endswith(".json"):
            found.declarations.append(path)
        elif text.endswith(".txt") and path.name.startswith("set"):
            found.sets.append(path)
    return found


def read_set_file(path: PathLike) -> List[str]:
    """Return the declaration identifiers listed in a set file.

    Empty lines and lines starting with ``#`` are skipped.
    """
    identifiers = []
    with open(path, "rb") as handle:
        for raw in handle:
            line = raw.rstrip(b"\n")
            if line.endswith(b"\r"):
                line = line[:-1]
            text = line.decode("utf-8", errors="replace")
            if text == "" or text.strip().startswith("#"):
                continue
            identifiers.append(text.strip())
    return identifiers


def sync_directory(
    client: NanoHubClient, directory: PathLike
) -> Tuple[List[Tuple[Path, str]], Dict[str, List[SetResult]]]:
    """Upload every declaration in ``directory`` and apply its set files.

    Returns the status line of each uploaded declaration file, and for each
    set the results of adding its declarations (empty for a set that lists
    none).
    """
    files = collect_sync_files(directory)
    statuses = create_declarations(client, *files.declarations)
    created = list(zip(files.declarations, statuses))

    members: Dict[str, List[str]] = {}
    for set_path in files.sets:
        members[set_name_from_path(set_path)] = read_set_file(set_path)

    set_results = {
        name: add_to_set(client, name, *identifiers) if identifiers else []
        for name, identifiers in members.items()
    }
    return created, set_results