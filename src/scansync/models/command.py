"""
Command files uploaded to the instrument as a control channel.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CommandRequest(BaseModel):
    """Newline-separated directives written verbatim to command.txt."""

    model_config = {"frozen": True}

    text: str = Field(min_length=1)

    @property
    def directives(self) -> list[str]:
        return self.text.splitlines()


SLEEP = CommandRequest(text="pause\npoweroff")
WAKE = CommandRequest(text="poweron\nresume")
REBOOT = CommandRequest(text="reboot")
