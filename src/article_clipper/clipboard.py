"""Clipboard access for clip triggers.

The system clipboard is read through the platform's paste command.
"""

import logging
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

PASTE_COMMANDS = {
    "darwin": [["pbpaste"]],
    "win32": [["powershell", "-NoProfile", "-Command", "Get-Clipboard"]],
    "linux": [
        ["wl-paste", "--no-newline"],
        ["xclip", "-selection", "clipboard", "-o"],
        ["xsel", "--clipboard", "--output"],
    ],
}


class ClipboardError(Exception):
    """Raised when the clipboard cannot be read."""

    pass


class ClipboardSource(ABC):
    """Abstract source of clipboard text."""

    @abstractmethod
    def read_text(self) -> str:
        pass


class CommandClipboard(ClipboardSource):
    """Read the clipboard by running the first available paste command.

    Attributes:
        commands: Candidate commands, tried in order
        timeout: Seconds to wait for the command
    """

    def __init__(
        self,
        commands: list[list[str]] | None = None,
        timeout: float = 5.0,
    ):
        if commands is None:
            commands = PASTE_COMMANDS.get(sys.platform, PASTE_COMMANDS["linux"])
        self.commands = commands
        self.timeout = timeout

    def read_text(self) -> str:
        """Return the clipboard text.

        Raises:
            ClipboardError: If no paste command is available or it fails
        """
        for command in self.commands:
            if shutil.which(command[0]) is None:
                continue
            try:
                completed = subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=True,
                )
            except (subprocess.SubprocessError, OSError) as e:
                raise ClipboardError(f"{command[0]} failed: {e}") from e
            logger.debug(f"Read clipboard with {command[0]}")
            return completed.stdout

        names = ", ".join(command[0] for command in self.commands)
        raise ClipboardError(f"No clipboard command available (tried {names})")
