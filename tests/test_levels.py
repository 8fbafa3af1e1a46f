"""Tests for the level policy masking functions."""

import pytest

from logscrubber.core.levels import mask_by_level, mask_ip, mask_uid


class TestMaskIP:
    """Test cases for mask_ip."""

    @pytest.mark.parametrize(
        "ip, level, expected",
        [
            ("192.168.1.10", 1, "192.168.1.10"),
            ("192.168.1.10", 2, "***.***.***.10"),
            ("192.168.1.10", 3, "***.***.***.***"),
            ("999.999.999.999", 3, "***.***.***.***"),
            ("10.0.0.001", 2, "***.***.***.001"),
            ("10.0.1", 3, "10.0.1"),
            ("192.168.1.10", 7, "192.168.1.10"),
        ],
    )
    def test_mask_ip(self, ip, level, expected):
        """IPs are masked by level; malformed input and unknown levels pass through."""
        assert mask_ip(ip, level) == expected


class TestMaskUID:
    """Test cases for mask_uid."""

    def test_thirty_character_uid(self):
        """A 30-character UID masks to 26 characters ending in its last 4."""
        uid = "abcdef123456789012345678901234"
        result = mask_uid(uid, 3)

        assert result == "*" * 22 + "1234"
        assert len(result) == 26

    def test_short_uid_never_grows(self):
        """A UID shorter than the target length keeps its own length."""
        uid = "abcdefghij0123456789"
        result = mask_uid(uid, 3)

        assert result == "*" * 16 + "6789"
        assert len(result) == len(uid)

    def test_uid_shorter_than_keep_length(self):
        assert mask_uid("abc", 3) == "***"

    def test_uid_of_keep_length_is_fully_masked(self):
        assert mask_uid("abcd", 3) == "****"

    @pytest.mark.parametrize("level", [1, 2, 0, 9])
    def test_uid_untouched_below_level_three(self, level):
        uid = "abcdef123456789012345678901234"
        assert mask_uid(uid, level) == uid


class TestMaskByLevel:
    """Test cases for the mask_by_level dispatcher."""

    def test_dispatches_by_kind(self):
        assert mask_by_level("ip", "1.2.3.4", 3) == "***.***.***.***"
        assert mask_by_level("uid", "a" * 30, 3) == "*" * 22 + "aaaa"

    def test_unknown_kind_passes_through(self):
        assert mask_by_level("email", "a@b.com", 3) == "a@b.com"
