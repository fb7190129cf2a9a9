# src/fencecat/utils/clipboard.py
import logging
import os
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import pyperclip

from fencecat.errors import SinkError

logger = logging.getLogger(__name__)


def is_wayland() -> bool:
    return bool(os.environ.get("WAYLAND_DISPLAY") or os.environ.get("WAYLAND_SOCKET"))


def is_x11() -> bool:
    return bool(os.environ.get("DISPLAY"))


def cmd_exists(name: str) -> bool:
    return shutil.which(name) is not None


def run_with_stdin(args: Sequence[str], data: bytes) -> None:
    """Runs a helper feeding `data` on stdin; raises OSError on a non-zero exit."""
    proc = subprocess.run(list(args), input=data, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    if proc.returncode != 0:
        raise OSError(f"{args[0]} exited with status {proc.returncode}")


def read_back_non_empty(args: Sequence[str]) -> bool:
    """True if the paste helper returns something. Unverifiable counts as success."""
    try:
        proc = subprocess.run(list(args), stdout=subprocess.PIPE, stderr=subprocess.DEVNULL, timeout=5)
    except (OSError, subprocess.TimeoutExpired):
        return True
    return bool(proc.stdout)


def scrub_surrogates(text: str) -> str:
    """Replaces lone surrogates (undecodable file bytes) with "?"."""
    return text.encode("utf-8", "replace").decode("utf-8")


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "replace")


class ClipboardAdapter(ABC):
    """One way of putting text on the system clipboard."""

    name = "clipboard"

    @abstractmethod
    def available(self) -> bool:
        """Whether this adapter can run in the current environment."""

    @abstractmethod
    def copy(self, text: str) -> None:
        """Copies text; raises OSError or SinkError on failure."""


class CommandAdapter(ClipboardAdapter):
    """Pipes text into an external helper, optionally verifying by reading back."""

    command: Sequence[str] = ()
    verify_command: Optional[Sequence[str]] = None

    @property
    def name(self) -> str:
        return self.command[0]

    def platform_ok(self) -> bool:
        return True

    def available(self) -> bool:
        return self.platform_ok() and cmd_exists(self.command[0])

    def copy(self, text: str) -> None:
        run_with_stdin(self.command, _encode(text))
        if not self.verify_command or not cmd_exists(self.verify_command[0]):
            return
        if not read_back_non_empty(self.verify_command):
            raise SinkError(f"{self.name} reported success but paste was empty")


class WlCopyAdapter(CommandAdapter):
    command = ("wl-copy", "--type", "text/plain;charset=utf-8", "-n")
    verify_command = ("wl-paste", "-n")

    def platform_ok(self) -> bool:
        return is_wayland()


class XclipAdapter(CommandAdapter):
    command = ("xclip", "-selection", "clipboard")
    verify_command = ("xclip", "-selection", "clipboard", "-o")

    def platform_ok(self) -> bool:
        return is_x11() or is_wayland()


class XselAdapter(CommandAdapter):
    command = ("xsel", "--clipboard", "--input")
    verify_command = ("xsel", "--clipboard", "--output")

    def platform_ok(self) -> bool:
        return is_x11() or is_wayland()


class PbcopyAdapter(CommandAdapter):
    command = ("pbcopy",)

    def platform_ok(self) -> bool:
        return sys.platform == "darwin"


class ClipExeAdapter(CommandAdapter):
    command = ("clip.exe",)

    def platform_ok(self) -> bool:
        return sys.platform == "win32"


class PowerShellAdapter(CommandAdapter):
    command = ("powershell", "-NoProfile", "-Command", "Set-Clipboard")

    def platform_ok(self) -> bool:
        return sys.platform == "win32"


class PyperclipAdapter(ClipboardAdapter):
    """Library fallback; pyperclip picks its own backend."""

    name = "pyperclip"

    def available(self) -> bool:
        return True

    def copy(self, text: str) -> None:
        try:
            pyperclip.copy(scrub_surrogates(text))
        except pyperclip.PyperclipException as e:
            raise SinkError(str(e))


def default_adapters() -> List[ClipboardAdapter]:
    """Priority order: Wayland, X11 helpers, macOS, Windows, then the library."""
    return [
        WlCopyAdapter(),
        XclipAdapter(),
        XselAdapter(),
        PbcopyAdapter(),
        ClipExeAdapter(),
        PowerShellAdapter(),
        PyperclipAdapter(),
    ]


def copy_to_clipboard(text: str, adapters: Optional[Sequence[ClipboardAdapter]] = None) -> str:
    """
    Tries each available adapter in order and returns the name of the one
    that succeeded. Raises SinkError carrying the last failure otherwise.
    """
    # every adapter sees the same surrogate-free text
    text = scrub_surrogates(text)
    last_error: Optional[Exception] = None
    for adapter in adapters if adapters is not None else default_adapters():
        if not adapter.available():
            continue
        try:
            adapter.copy(text)
        except (OSError, SinkError) as e:
            logger.warning("%s failed: %s", adapter.name, e)
            last_error = e
            continue
        logger.debug("Copied to clipboard via %s", adapter.name)
        return adapter.name

    if last_error is None:
        raise SinkError("no clipboard backend available")
    raise SinkError(f"all clipboard backends failed; last error: {last_error}")
