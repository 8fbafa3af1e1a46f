"""
Scrubber session
----------------

All mutable state of one file-processing run lives here: the fixed level,
the identity mapper, the per-kind replacement caches and the audit ledger.
Callers only go through ``link`` and the ``resolve_*`` methods; the maps
themselves are never handed out.
"""

import logging
from typing import Dict, List

from logscrubber.core.audit import AuditLedger
from logscrubber.core.constants import (
    DEFAULT_DOMAIN,
    SCRUB_LEVEL_HIGH,
    SCRUB_LEVEL_LOW,
    SCRUB_LEVEL_MEDIUM,
    TYPE_EMAIL,
    TYPE_IP,
    TYPE_UID,
    TYPE_USERNAME,
)
from logscrubber.core.identity import IdentityMapper
from logscrubber.core.levels import mask_by_level
from logscrubber.core.models import AuditRecord

logger = logging.getLogger(__name__)


class ScrubberSession:
    def __init__(
        self,
        level: int,
        verbose: bool = False,
        alias_domains: bool = True,
        domain_suffix: str = DEFAULT_DOMAIN,
    ):
        self.level = level
        self.verbose = verbose
        self.identities = IdentityMapper(
            verbose=verbose, alias_domains=alias_domains, domain_suffix=domain_suffix
        )
        self.ledger = AuditLedger()
        self._email_cache: Dict[str, str] = {}
        self._username_cache: Dict[str, str] = {}
        self._ip_cache: Dict[str, str] = {}
        self._uid_cache: Dict[str, str] = {}

    @property
    def scrubs_ips(self) -> bool:
        return self.level >= SCRUB_LEVEL_MEDIUM

    @property
    def scrubs_uids(self) -> bool:
        return self.level == SCRUB_LEVEL_HIGH

    @property
    def level_name(self) -> str:
        return {
            SCRUB_LEVEL_LOW: "low",
            SCRUB_LEVEL_MEDIUM: "medium",
            SCRUB_LEVEL_HIGH: "high",
        }.get(self.level, "unknown")

    def link(self, username: str, email: str) -> None:
        self.identities.link_or_create(username, email)

    def resolve_email(self, email: str, source: str) -> str:
        key = email.lower()
        replacement = self._email_cache.get(key)
        if replacement is None:
            replacement = self.identities.render_email(email)
            self._email_cache[key] = replacement
        self.ledger.record(email, replacement, TYPE_EMAIL, source)
        return replacement

    def resolve_username(self, username: str, source: str) -> str:
        key = username.lower()
        replacement = self._username_cache.get(key)
        if replacement is None:
            replacement = self.identities.render_username(username)
            self._username_cache[key] = replacement
        self.ledger.record(username, replacement, TYPE_USERNAME, source)
        return replacement

    def resolve_ip(self, ip: str, source: str) -> str:
        replacement = self._ip_cache.get(ip)
        if replacement is None:
            replacement = mask_by_level(TYPE_IP, ip, self.level)
            self._ip_cache[ip] = replacement
        self.ledger.record(ip, replacement, TYPE_IP, source)
        return replacement

    def resolve_uid(self, uid: str, source: str) -> str:
        replacement = self._uid_cache.get(uid)
        if replacement is None:
            replacement = mask_by_level(TYPE_UID, uid, self.level)
            self._uid_cache[uid] = replacement
        self.ledger.record(uid, replacement, TYPE_UID, source)
        return replacement

    def audit_records(self) -> List[AuditRecord]:
        return self.ledger.records()

    def domain_aliases(self) -> Dict[str, str]:
        return self.identities.domains.aliases()
