"""
Per-session backlog of files and data folders waiting for download.

Both stacks are LIFO: the entry listed last is handled first.
"""

from __future__ import annotations

from scansync.models.inventory import FileEntry, FolderEntry, Inventory


class Backlog:
    """Files and folders discovered but not yet downloaded for one instrument."""

    def __init__(self) -> None:
        self._files: list[FileEntry] = []
        self._folders: list[FolderEntry] = []

    @property
    def files(self) -> tuple[FileEntry, ...]:
        return tuple(self._files)

    @property
    def folders(self) -> tuple[FolderEntry, ...]:
        return tuple(self._folders)

    def replace(self, inventory: Inventory) -> None:
        """Start over from a top-level listing."""
        self._files = list(inventory.files)
        self._folders = list(inventory.folders)

    def replace_files(self, files: list[FileEntry]) -> None:
        """Start over from a sub-folder listing; folders are kept."""
        self._files = list(files)

    def push_file(self, entry: FileEntry) -> None:
        self._files.append(entry)

    def push_folder(self, entry: FolderEntry) -> None:
        self._folders.append(entry)

    def latest_file(self) -> FileEntry | None:
        return self._files[-1] if self._files else None

    def pop_file(self) -> FileEntry:
        return self._files.pop()

    def discard_folder(self, entry: FolderEntry) -> None:
        """Drop a folder once it is removed or abandoned."""
        try:
            self._folders.remove(entry)
        except ValueError:
            pass

    def snapshot_folders(self) -> list[FolderEntry]:
        """Private copy for iterating while the backlog changes underneath."""
        return list(self._folders)

    def clear_files(self) -> None:
        self._files.clear()

    def clear(self) -> None:
        self._files.clear()
        self._folders.clear()

    @property
    def is_empty(self) -> bool:
        return not self._files and not self._folders

    def __len__(self) -> int:
        return len(self._files) + len(self._folders)

    def __repr__(self) -> str:
        return f"Backlog(files={len(self._files)}, folders={len(self._folders)})"
