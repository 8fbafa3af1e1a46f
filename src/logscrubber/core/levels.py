"""Level policy: pure masking functions keyed on the scrubbing level."""

from logscrubber.core.constants import (
    MASK_CHAR,
    SCRUB_LEVEL_HIGH,
    SCRUB_LEVEL_MEDIUM,
    TYPE_IP,
    TYPE_UID,
    UID_KEEP_CHARS,
    UID_TARGET_LENGTH,
)


def mask_ip(ip: str, level: int) -> str:
    """
    Mask an IPv4 address.

    Level 2 keeps the last group verbatim, level 3 masks every group.
    Anything that does not split into four groups is returned unchanged.
    """
    parts = ip.split(".")
    if len(parts) != 4:
        return ip

    if level == SCRUB_LEVEL_MEDIUM:
        return "***.***.***." + parts[3]
    if level == SCRUB_LEVEL_HIGH:
        return "***.***.***.***"
    return ip


def mask_uid(uid: str, level: int) -> str:
    """
    Mask a long identifier at level 3, keeping its last characters.

    The output is at most UID_TARGET_LENGTH long and never longer than the
    input.
    """
    if level != SCRUB_LEVEL_HIGH:
        return uid

    keep = UID_KEEP_CHARS
    if len(uid) <= keep:
        return MASK_CHAR * len(uid)

    masked_length = min(max(UID_TARGET_LENGTH - keep, 0), len(uid) - keep)
    return MASK_CHAR * masked_length + uid[len(uid) - keep :]


_POLICIES = {
    TYPE_IP: mask_ip,
    TYPE_UID: mask_uid,
}


def mask_by_level(kind: str, value: str, level: int) -> str:
    """Apply the level policy for ``kind``; kinds without a policy pass through."""
    policy = _POLICIES.get(kind)
    if policy is None:
        return value
    return policy(value, level)
