"""
Models for remote inventory (files and data folders found by a listing).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BoxVersion(str, Enum):
    """Electronics box generation of the instrument."""

    V1 = "v1"
    V2 = "v2"  # Axis, detected from the login banner
    V3 = "v3"
    V4 = "v4"  # AxiomTek, single login for all accounts

    @property
    def data_extension(self) -> str:
        """Extension used for data files on this generation."""
        return "PAK" if self is BoxVersion.V1 else "pak"

    @property
    def probe_before_delete(self) -> bool:
        """Whether a remote file must be found before it can be removed."""
        return self is BoxVersion.V1

    @property
    def single_login(self) -> bool:
        return self is BoxVersion.V4


class Disk(str, Enum):
    """Logical volume tag on the instrument."""

    A = "A"  # admin account
    B = "B"  # data account


class FileEntry(BaseModel):
    """One remote data file found on a listing pass."""

    model_config = {"frozen": True}

    disk: Disk = Disk.B
    base_name: str
    extension: str
    size_bytes: int = Field(ge=0)
    date_stamp: str = ""
    time_stamp: str = ""

    def remote_name(self, box: BoxVersion) -> str:
        """Filename on the instrument, with the box's data extension."""
        return f"{self.base_name}.{box.data_extension}"

    def __repr__(self) -> str:
        return f"FileEntry({self.base_name}.{self.extension}, {self.size_bytes}B)"


class FolderEntry(BaseModel):
    """
    One remote data folder (e.g. ``R012``) found on a listing pass.

    The tag letter is checked by the listing schema, not here.
    """

    model_config = {"frozen": True}

    name: str = Field(min_length=4, max_length=4)


class Inventory(BaseModel):
    """Everything a single listing produced, in listing order."""

    files: list[FileEntry] = Field(default_factory=list)
    folders: list[FolderEntry] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.folders

    def summary(self) -> str:
        return f"{len(self.files)} files and {len(self.folders)} folders"
