"""Output path helpers: default names and handling of files that already exist."""

import os
from datetime import datetime
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from logscrubber.core.constants import (
    AUDIT_SUFFIX,
    AUDIT_TYPE_JSON,
    EXT_CSV,
    EXT_GZ,
    EXT_JSON,
    OVERWRITE_CANCEL,
    OVERWRITE_OVERWRITE,
    OVERWRITE_PROMPT,
    OVERWRITE_TIMESTAMP,
    SCRUB_SUFFIX,
)
from logscrubber.core.exceptions import OperationCancelledError

CHOICE_OVERWRITE = "overwrite"
CHOICE_CANCEL = "cancel"
CHOICE_RENAME = "rename"

_PROMPT_CHOICES = {
    "o": CHOICE_OVERWRITE,
    "overwrite": CHOICE_OVERWRITE,
    "c": CHOICE_CANCEL,
    "cancel": CHOICE_CANCEL,
    "r": CHOICE_RENAME,
    "rename": CHOICE_RENAME,
}

ChoicePrompt = Callable[[str], str]


def default_output_path(input_path: str, compress: bool = False) -> str:
    base, ext = os.path.splitext(input_path)
    path = base + SCRUB_SUFFIX + ext
    if compress and not path.endswith(EXT_GZ):
        path += EXT_GZ
    return path


def default_audit_path(input_path: str, audit_type: str) -> str:
    base, _ = os.path.splitext(input_path)
    ext = EXT_JSON if audit_type == AUDIT_TYPE_JSON else EXT_CSV
    return base + AUDIT_SUFFIX + ext


def generate_timestamp_suffix(original_path: str, now: Optional[datetime] = None) -> str:
    """'logs/app.log' -> 'logs/app_20250101_120000.log'"""
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    directory, base = os.path.split(original_path)
    name, ext = os.path.splitext(base)
    return os.path.join(directory, f"{name}_{timestamp}{ext}")


def prompt_user_choice(file_path: str, console: Optional[Console] = None) -> str:
    """Ask the operator what to do about an existing file."""
    console = console or Console()
    console.print(f"File '{file_path}' already exists.")
    answer = Prompt.ask(
        "Choose an option: (o)verwrite, (c)ancel, or (r)ename with timestamp?",
        choices=list(_PROMPT_CHOICES),
        show_choices=False,
        case_sensitive=False,
        console=console,
    )
    return _PROMPT_CHOICES[answer.strip().lower()]


def handle_file_conflict(
    file_path: str,
    overwrite_action: str,
    prompt: Optional[ChoicePrompt] = None,
) -> str:
    """Map the configured overwrite action to 'overwrite', 'cancel' or 'rename'."""
    if overwrite_action == OVERWRITE_OVERWRITE:
        return CHOICE_OVERWRITE
    if overwrite_action == OVERWRITE_TIMESTAMP:
        return CHOICE_RENAME
    if overwrite_action == OVERWRITE_CANCEL:
        return CHOICE_CANCEL
    return (prompt or prompt_user_choice)(file_path)


def resolve_output_path(
    file_path: str,
    overwrite_action: str = OVERWRITE_PROMPT,
    prompt: Optional[ChoicePrompt] = None,
) -> str:
    """
    Return the path that should actually be written.

    Raises OperationCancelledError when the conflict resolves to cancel.
    """
    if not os.path.exists(file_path):
        return file_path

    choice = handle_file_conflict(file_path, overwrite_action, prompt)
    if choice == CHOICE_RENAME:
        return generate_timestamp_suffix(file_path)
    if choice == CHOICE_CANCEL:
        if overwrite_action == OVERWRITE_CANCEL:
            message = f"file '{file_path}' already exists and OverwriteAction is set to 'cancel'"
        else:
            message = "operation cancelled by user"
        raise OperationCancelledError(message, path=file_path)
    return file_path
