"""
Per-instrument session state.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from scansync.exceptions import StorageError
from scansync.logging import get_logger
from scansync.models.inventory import BoxVersion

logger = get_logger(__name__)

FILE_LIST_NAME = "fileList.txt"
COMMAND_FILE_NAME = "command.txt"
CFG_FILE_NAME = "cfg.txt"


class SessionContext(BaseModel):
    """
    State for one instrument's polling cycle.

    Owned by a single caller; the engine updates ``box`` (auto-detection)
    and ``data_speed`` (after each timed download).
    """

    node_index: int = 0
    box: BoxVersion = BoxVersion.V1
    host: str
    port: int = 21
    user: str = "anonymous"
    password: str = ""
    admin_user: str | None = None
    admin_password: str | None = None
    timeout: float = 30.0
    storage_dir: Path
    serial: str
    data_speed: float = Field(default=4.0, description="Last measured speed, KB/s")

    @model_validator(mode="before")
    @classmethod
    def _admin_credentials(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        box = BoxVersion(data.get("box", BoxVersion.V1))
        if box.single_login or data.get("admin_user") is None:
            data = {
                **data,
                "admin_user": data.get("user", "anonymous"),
                "admin_password": data.get("password", ""),
            }
        return data

    @classmethod
    def for_instrument(
        cls,
        output_directory: Path | str,
        serial: str,
        host: str,
        **kwargs: object,
    ) -> SessionContext:
        """
        Build a context with the standard ``<output>/Temp/<serial>/`` storage.

        Falls back to the system temp folder when the output directory
        cannot be created.

        Raises:
            StorageError: Neither location is writable.
        """
        storage = Path(output_directory) / "Temp" / serial
        try:
            storage.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            fallback = Path(tempfile.gettempdir()) / serial
            logger.warning(f"Could not create {storage} ({e}), using {fallback}")
            try:
                fallback.mkdir(parents=True, exist_ok=True)
            except OSError as e2:
                raise StorageError(fallback, cause=e2) from e2
            storage = fallback
        return cls(storage_dir=storage, serial=serial, host=host, **kwargs)  # type: ignore[arg-type]

    @property
    def tag(self) -> str:
        """Prefix for status messages."""
        return f"<node {self.node_index}>"

    @property
    def file_list_path(self) -> Path:
        return self.storage_dir / FILE_LIST_NAME

    @property
    def command_path(self) -> Path:
        return self.storage_dir / COMMAND_FILE_NAME

    @property
    def cfg_path(self) -> Path:
        return self.storage_dir / CFG_FILE_NAME

    @property
    def cfg_archive_path(self) -> Path:
        return self.storage_dir / f"cfg_{self.serial}.txt"
