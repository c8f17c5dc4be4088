"""Filesystem helpers used by the file and directory verbs."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass

DRAFT_CONTENT = "Draft\n"


@dataclass(frozen=True)
class FsStatus:
    """Outcome of one filesystem operation.

    ``errors`` hold texts ready to be shown after the shell prefix,
    ``copied`` lists ``(source, destination)`` pairs written by a copy.
    """

    errors: tuple[str, ...] = ()
    copied: tuple[tuple[str, str], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def failure(cls, message: str) -> FsStatus:
        return cls(errors=(message,))


def _strerror(exc: OSError) -> str:
    return exc.strerror or str(exc)


def exists(path: str) -> bool:
    return os.path.exists(path)


def is_file(path: str) -> bool:
    return os.path.isfile(path)


def is_directory(path: str) -> bool:
    return os.path.isdir(path)


def describe_path(path: str) -> str:
    """Answer the ``dwelt`` question for one path."""

    if not exists(path):
        return "Dwelt not."
    if is_file(path):
        return "Dwelt indeed."
    if is_directory(path):
        return "Abode is."
    return "Dwelt not."


def create_file_with_content(path: str, content: str = DRAFT_CONTENT) -> FsStatus:
    """Create a new file; an existing path is never overwritten."""

    if exists(path):
        return FsStatus.failure(f"{path} already exists.")
    try:
        with open(path, "x", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        return FsStatus.failure(f"{path}: {_strerror(exc)}")
    return FsStatus()


def copy_file(source: str, dest: str, *, overwrite: bool = False) -> FsStatus:
    if not exists(source) or is_directory(source):
        return FsStatus.failure(f"{source}: No such file")
    if is_directory(dest):
        return FsStatus.failure(f"{dest}: Destination cannot be a directory")
    if not overwrite and is_file(dest):
        return FsStatus.failure(f"{dest}: File already exists")
    try:
        shutil.copyfile(source, dest)
    except OSError as exc:
        name = exc.filename if isinstance(exc.filename, str) else dest
        return FsStatus.failure(f"{name}: {_strerror(exc)}")
    return FsStatus(copied=((source, dest),))


def _strip_dot_slash(path: str) -> str:
    return path[2:] if path.startswith("./") else path


def copy_directory(source: str, dest: str) -> FsStatus:
    """Recursively copy ``source`` into ``dest``, overwriting files.

    A target that lives inside the source is never descended into, so
    ``coppyabode a a/backup`` terminates.
    """

    source = _strip_dot_slash(source)
    dest = _strip_dot_slash(dest)
    if is_directory(source) and os.path.realpath(source) == os.path.realpath(dest):
        return FsStatus.failure(f"Cannot copy '{source}' into itself")

    errors: list[str] = []
    copied: list[tuple[str, str]] = []
    _copy_tree(source, dest, os.path.realpath(dest), errors, copied)
    return FsStatus(errors=tuple(errors), copied=tuple(copied))


def _copy_tree(
    source: str,
    dest: str,
    target_root: str,
    errors: list[str],
    copied: list[tuple[str, str]],
) -> None:
    if not is_directory(source):
        errors.append(f"{source}: Not a directory")
        return
    if not is_directory(dest):
        try:
            os.mkdir(dest)
        except OSError as exc:
            errors.append(f"{dest} : {_strerror(exc)}")
            return

    try:
        entries = sorted(os.scandir(source), key=lambda entry: entry.name)
    except OSError as exc:
        errors.append(f"{source}: {_strerror(exc)}")
        return

    for entry in entries:
        source_path = f"{source}/{entry.name}"
        if os.path.realpath(source_path) == target_root:
            continue
        dest_path = f"{dest}/{entry.name}"
        if entry.is_file(follow_symlinks=False):
            status = copy_file(source_path, dest_path, overwrite=True)
            errors.extend(status.errors)
            copied.extend(status.copied)
        elif entry.is_dir(follow_symlinks=False):
            _copy_tree(source_path, dest_path, target_root, errors, copied)


def change_working_directory(path: str) -> FsStatus:
    if not is_directory(path):
        return FsStatus.failure(f"{path}: Not a directory")
    try:
        os.chdir(path)
    except OSError as exc:
        return FsStatus.failure(_strerror(exc))
    return FsStatus()
