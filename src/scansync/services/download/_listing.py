"""
Parser for the instrument's directory listings.

The instrument answers LIST with Unix-style lines:

    -rw-r--r--   1 root  root   1024 Mar 12 10:41 U001.PAK
    drwxr-xr-x   2 root  root      0 Mar 11 23:59 R012

Fields are taken by fixed token position; the positions live in
ListingSchema so a different listing format only needs a new schema.
"""

from __future__ import annotations

from pydantic import BaseModel

from scansync.exceptions import ListingParseError
from scansync.logging import get_logger
from scansync.models.inventory import BoxVersion, Disk, FileEntry, FolderEntry, Inventory

logger = get_logger(__name__)


class ListingSchema(BaseModel):
    """Token positions and markers of one listing format."""

    model_config = {"frozen": True}

    token_count: int = 9
    size_index: int = 4
    month_index: int = 5
    day_index: int = 6
    time_index: int = 7
    name_index: int = 8
    directory_prefix: str = "drw"
    folder_name_length: int = 4
    folder_tag: str = "R"
    stop_marker: str = "\ufffd"  # replacement char left by an undecodable byte
    stop_on_non_ascii: bool = True


DEFAULT_SCHEMA = ListingSchema()


def data_file_extension(box: BoxVersion) -> str:
    return box.data_extension


def is_data_file_extension(box: BoxVersion, extension: str) -> bool:
    """Case-sensitive: V1 boxes write PAK, later ones pak."""
    return extension == box.data_extension


def split_suffix(name: str) -> tuple[str, str]:
    """
    Split a filename at its last period.

    Names shorter than 5 characters or without a period are returned
    unchanged with an empty extension.
    """
    position = name.rfind(".")
    if len(name) < 5 or position < 0:
        return name, ""
    return name[:position], name[position + 1 :]


def parse_folder_line(line: str, schema: ListingSchema = DEFAULT_SCHEMA) -> FolderEntry | None:
    """Data folder named by the last characters of a directory line, if tagged."""
    name = line.rstrip()[-schema.folder_name_length :]
    if len(name) != schema.folder_name_length:
        return None
    if name[0].upper() != schema.folder_tag.upper():
        return None
    return FolderEntry(name=name)


def _tokenize(line: str, schema: ListingSchema) -> list[str]:
    tokens = line.split()
    if len(tokens) < schema.token_count:
        raise ListingParseError(line, f"{len(tokens)} of {schema.token_count} tokens")
    try:
        int(tokens[schema.size_index])
    except ValueError:
        raise ListingParseError(line, "size is not a number") from None
    return tokens


def parse_listing_line(
    line: str,
    box: BoxVersion,
    disk: Disk = Disk.B,
    schema: ListingSchema = DEFAULT_SCHEMA,
) -> FileEntry | FolderEntry | None:
    """
    Classify one listing line.

    Returns:
        FolderEntry for a tagged data folder, FileEntry for a data file of
        this box's convention, None for anything else (including malformed lines).
    """
    line = line.replace("\r", "").replace("\n", "")
    if line.startswith(schema.directory_prefix):
        return parse_folder_line(line, schema)

    try:
        tokens = _tokenize(line, schema)
    except ListingParseError as e:
        logger.debug(f"Skipping listing line: {e}")
        return None

    name = tokens[schema.name_index]
    if name in (".", ".."):
        return None

    base_name, extension = split_suffix(name)
    if not is_data_file_extension(box, extension):
        return None

    return FileEntry(
        disk=disk,
        base_name=base_name,
        extension=extension,
        size_bytes=int(tokens[schema.size_index]),
        date_stamp=f"{tokens[schema.month_index]} {tokens[schema.day_index]}",
        time_stamp=tokens[schema.time_index],
    )


def parse_listing(
    raw: str | bytes,
    box: BoxVersion,
    disk: Disk = Disk.B,
    schema: ListingSchema = DEFAULT_SCHEMA,
) -> Inventory:
    """
    Parse a whole listing into files and data folders, in listing order.

    Scanning stops at the first empty line or at a line holding the
    stop marker (an undecodable byte) or, unless the schema disables it,
    any other non-ASCII character; a short listing is not an error.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")

    inventory = Inventory()
    for line in raw.splitlines():
        if not line.strip():
            break
        if schema.stop_marker in line:
            break
        if schema.stop_on_non_ascii and not line.isascii():
            break
        entry = parse_listing_line(line, box, disk, schema)
        if isinstance(entry, FolderEntry):
            inventory.folders.append(entry)
        elif isinstance(entry, FileEntry):
            inventory.files.append(entry)
    return inventory


__all__ = [
    "DEFAULT_SCHEMA",
    "ListingSchema",
    "data_file_extension",
    "is_data_file_extension",
    "parse_folder_line",
    "parse_listing",
    "parse_listing_line",
    "split_suffix",
]
