"""
Value classifier
----------------

Compiled-once regular expressions that locate the four kinds of values the
scrubber rewrites. They run on the raw text of a line, never on parsed JSON
values, so the punctuation around a match is left untouched.

Passes are applied in this order, each on the output of the previous one:
emails, usernames, IP addresses, UIDs.
"""

import re
from typing import Callable, List, Optional

from logscrubber.core.constants import MIN_UID_LENGTH

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# Only the quoted value (group 1) is replaced, the key and separator are kept as-is
USERNAME_PATTERN = re.compile(r'"(?:user|username)"\s*:\s*"([^"]+)"')

# No octet range check: "999.999.999.999" is still an IP
IP_PATTERN = re.compile(r"\b(?:[0-9]{1,3}\.){3}[0-9]{1,3}\b", re.ASCII)

UID_PATTERN = re.compile(r"\b[a-z0-9]{%d,}\b" % MIN_UID_LENGTH, re.ASCII)

Replacer = Callable[[str], str]


def find_emails(text: str) -> List[str]:
    return EMAIL_PATTERN.findall(text)


def find_usernames(text: str) -> List[str]:
    return USERNAME_PATTERN.findall(text)


def find_ips(text: str) -> List[str]:
    return IP_PATTERN.findall(text)


def find_uids(text: str) -> List[str]:
    return UID_PATTERN.findall(text)


def replace_emails(text: str, replacer: Replacer) -> str:
    return EMAIL_PATTERN.sub(lambda m: replacer(m.group(0)), text)


def replace_usernames(text: str, replacer: Replacer) -> str:
    """Rewrite the value of every quoted ``user``/``username`` field."""

    def _sub(m: "re.Match[str]") -> str:
        whole = m.group(0)
        start = m.start(1) - m.start(0)
        end = m.end(1) - m.start(0)
        return whole[:start] + replacer(m.group(1)) + whole[end:]

    return USERNAME_PATTERN.sub(_sub, text)


def replace_ips(text: str, replacer: Replacer) -> str:
    return IP_PATTERN.sub(lambda m: replacer(m.group(0)), text)


def replace_uids(text: str, replacer: Replacer) -> str:
    return UID_PATTERN.sub(lambda m: replacer(m.group(0)), text)


def username_field(obj: dict) -> Optional[str]:
    """
    Return the username-shaped field of a parsed JSON object.

    ``user`` wins over ``username``: when ``user`` is present but is not a
    string, ``username`` is not consulted.
    """
    if "user" in obj:
        value = obj["user"]
    elif "username" in obj:
        value = obj["username"]
    else:
        return None
    return value if isinstance(value, str) else None


def email_field(obj: dict) -> Optional[str]:
    value = obj.get("email")
    return value if isinstance(value, str) else None
