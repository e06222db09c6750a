"""Best-effort delivery of text to the system clipboard."""

import logging
import shutil
import subprocess
from typing import List, Sequence

logger = logging.getLogger(__name__)

CLIPBOARD_COMMANDS: Sequence[List[str]] = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
)


def copy_to_clipboard(text: str) -> bool:
    """Copy text using the first clipboard tool found on PATH.

    Failures are logged and reported through the return value only.

    Returns:
        True if the text reached the clipboard
    """
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]) is None:
            continue
        try:
            subprocess.run(command, input=text, text=True, check=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.error("Clipboard copy with %s failed: %s", command[0], exc)
            return False
        return True

    logger.error("No clipboard tool available")
    return False
