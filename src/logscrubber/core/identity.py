"""
Identity mapper
---------------

Assigns every detected user a stable ordinal and every email domain a stable
numbered alias for the lifetime of one run.

A ``UserIdentity`` is a single record indexed from two keys: the lower-cased
username and the lower-cased email. Once both fields of a person have been
seen together, a lookup through either key returns the same record, so the
username renders as ``user<N>`` and the email as ``user<N>@<alias>``.
Ordinals are handed out in first-detection order and never reused.
"""

import logging
from typing import Dict, Optional

from logscrubber.core.constants import (
    DEFAULT_DOMAIN,
    DOMAIN_PREFIX,
    FIXED_EMAIL_DOMAIN,
    USER_PREFIX,
)
from logscrubber.core.models import DomainAlias, UserIdentity

logger = logging.getLogger(__name__)


class DomainAliaser:
    """Maps original email domains to ``domain<N>.<suffix>``."""

    def __init__(self, suffix: str = DEFAULT_DOMAIN, verbose: bool = False):
        self.suffix = suffix
        self.verbose = verbose
        self._aliases: Dict[str, DomainAlias] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._aliases)

    def alias_for_email(self, email: str) -> str:
        parts = email.split("@")
        if len(parts) != 2:
            return DEFAULT_DOMAIN
        return self.alias_for_domain(parts[1])

    def alias_for_domain(self, domain: str) -> str:
        key = domain.lower()
        existing = self._aliases.get(key)
        if existing is not None:
            return existing.alias

        self._counter += 1
        alias = f"{DOMAIN_PREFIX}{self._counter}.{self.suffix}"
        self._aliases[key] = DomainAlias(original=key, alias=alias, ordinal=self._counter)

        if self.verbose:
            logger.info("Created domain mapping: %s -> %s", key, alias)
        return alias

    def aliases(self) -> Dict[str, str]:
        return {key: entry.alias for key, entry in self._aliases.items()}


class IdentityMapper:
    """Registry of user identities keyed case-insensitively by username and email."""

    def __init__(
        self,
        verbose: bool = False,
        alias_domains: bool = True,
        domain_suffix: str = DEFAULT_DOMAIN,
    ):
        self.verbose = verbose
        self.alias_domains = alias_domains
        self.domains = DomainAliaser(suffix=domain_suffix, verbose=verbose)
        self._by_key: Dict[str, UserIdentity] = {}
        self._counter = 0

    @property
    def identity_count(self) -> int:
        return self._counter

    def lookup(self, key: str) -> Optional[UserIdentity]:
        return self._by_key.get(key.lower())

    def _allocate(self, username: Optional[str] = None, email: Optional[str] = None) -> UserIdentity:
        self._counter += 1
        return UserIdentity(ordinal=self._counter, username=username, email=email)

    def link_or_create(self, username: str, email: str) -> UserIdentity:
        """
        Record that ``username`` and ``email`` belong to the same person.

        An identity already known under either key absorbs the missing field
        and becomes reachable through both keys. Otherwise a new identity is
        allocated holding both.
        """
        username_key = username.lower()
        email_key = email.lower()

        identity = self._by_key.get(username_key)
        if identity is not None:
            if identity.email is None:
                identity.email = email
                self._by_key[email_key] = identity
            return identity

        identity = self._by_key.get(email_key)
        if identity is not None:
            if identity.username is None:
                identity.username = username
                self._by_key[username_key] = identity
            return identity

        identity = self._allocate(username=username, email=email)
        self._by_key[username_key] = identity
        self._by_key[email_key] = identity

        if self.verbose:
            logger.info(
                "Created user mapping: %s / %s -> %s%d",
                username,
                email,
                USER_PREFIX,
                identity.ordinal,
            )
        return identity

    def resolve_username(self, username: str) -> UserIdentity:
        """Return the identity for a username, creating a standalone one if unseen."""
        key = username.lower()
        identity = self._by_key.get(key)
        if identity is None:
            identity = self._allocate(username=username)
            self._by_key[key] = identity
            if self.verbose:
                logger.info(
                    "Created standalone user mapping: %s -> %s%d",
                    username,
                    USER_PREFIX,
                    identity.ordinal,
                )
        return identity

    def resolve_email(self, email: str) -> UserIdentity:
        """Return the identity for an email, creating a standalone one if unseen."""
        key = email.lower()
        identity = self._by_key.get(key)
        if identity is None:
            identity = self._allocate(email=email)
            self._by_key[key] = identity
            if self.verbose:
                logger.info(
                    "Created standalone email mapping: %s -> %s%d",
                    email,
                    USER_PREFIX,
                    identity.ordinal,
                )
        return identity

    def render_username(self, username: str) -> str:
        identity = self.resolve_username(username)
        return f"{USER_PREFIX}{identity.ordinal}"

    def render_email(self, email: str) -> str:
        identity = self.resolve_email(email)
        if self.alias_domains:
            domain = self.domains.alias_for_email(email)
        else:
            domain = FIXED_EMAIL_DOMAIN
        return f"{USER_PREFIX}{identity.ordinal}@{domain}"
