"""Tests for ScrubberSession resolution and caching."""

import pytest

from logscrubber.core.session import ScrubberSession


class TestScrubberSession:
    """Test cases for ScrubberSession."""

    @pytest.mark.parametrize(
        "level, scrubs_ips, scrubs_uids",
        [(1, False, False), (2, True, False), (3, True, True)],
    )
    def test_level_switches(self, level, scrubs_ips, scrubs_uids):
        session = ScrubberSession(level)
        assert session.scrubs_ips is scrubs_ips
        assert session.scrubs_uids is scrubs_uids

    def test_email_cache_is_case_insensitive(self):
        session = ScrubberSession(1)

        first = session.resolve_email("Bob@X.com", "a.log")
        second = session.resolve_email("bob@x.com", "a.log")

        assert first == second == "user1@domain1.example.com"
        assert len(session.audit_records()) == 2

    def test_cached_replacement_survives_relinking(self):
        """An email keeps its first replacement even if later linked elsewhere."""
        session = ScrubberSession(1)
        email_replacement = session.resolve_email("x@corp.com", "a.log")
        session.resolve_username("carol", "a.log")
        session.link("carol", "x@corp.com")

        assert session.resolve_email("x@corp.com", "a.log") == email_replacement
        assert session.ledger.get("x@corp.com").times_replaced == 2

    def test_ip_and_uid_follow_level(self):
        session = ScrubberSession(3)

        assert session.resolve_ip("10.1.2.3", "a.log") == "***.***.***.***"
        assert session.resolve_uid("a" * 26, "a.log") == "*" * 22 + "aaaa"
        assert {r.type for r in session.audit_records()} == {"ip", "uid"}

    def test_domain_aliases_exposed_as_copy(self):
        session = ScrubberSession(1)
        session.resolve_email("a@corp.com", "a.log")

        aliases = session.domain_aliases()
        aliases["other.com"] = "tampered"

        assert session.domain_aliases() == {"corp.com": "domain1.example.com"}
