"""
Line processor
--------------

Turns one raw log line into its scrubbed form. JSON object lines first have
every username/email pair in their tree linked in the identity mapper, and
only then are the masking passes run over the raw text, which keeps the
original field order and formatting. A JSON line whose scrubbed text no
longer parses is emitted unchanged. Anything that is not a JSON object is
scrubbed as plain text.
"""

import json
import logging
from typing import Any, Iterator, List, Tuple

from logscrubber.core import classifier
from logscrubber.core.constants import (
    JSON_FAILURE_SAMPLE_LENGTH,
    MAX_JSON_FAILURE_SAMPLES,
)
from logscrubber.core.models import JSONFailure, LineResult
from logscrubber.core.session import ScrubberSession

logger = logging.getLogger(__name__)


def iter_user_records(tree: Any) -> Iterator[Tuple[str, str]]:
    """
    Yield every (username, email) pair held by a single object in ``tree``.

    Objects and arrays are walked depth-first in document order with an
    explicit stack, so arbitrarily deep documents do not hit the recursion
    limit. Nested values are visited whether or not their parent matched.
    """
    stack: List[Any] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            username = classifier.username_field(node)
            email = classifier.email_field(node)
            if username and email:
                yield username, email
            stack.extend(reversed(list(node.values())))
        elif isinstance(node, list):
            stack.extend(reversed(node))


class LineProcessor:
    """Scrubs single lines against a shared ``ScrubberSession``."""

    def __init__(self, session: ScrubberSession):
        self.session = session
        self.json_success_count = 0
        self.json_failure_count = 0
        self.reverted_count = 0
        self.json_failures: List[JSONFailure] = []

    def process_line(self, line: str, source: str, line_number: int = 0) -> LineResult:
        try:
            data = json.loads(line)
        except (ValueError, RecursionError) as e:
            self._track_json_failure(line_number, line, str(e))
            return LineResult(text=self.scrub_text(line, source))

        if not isinstance(data, dict):
            self._track_json_failure(line_number, line, "line is not a JSON object")
            return LineResult(text=self.scrub_text(line, source))

        self.json_success_count += 1
        self.link_identities(data)

        # Audit writes for this line only land once the output is known to be kept
        ledger = self.session.ledger
        ledger.begin_line()
        try:
            scrubbed = self.scrub_text(line, source)
        except Exception:
            ledger.discard()
            raise

        try:
            json.loads(scrubbed)
        except (ValueError, RecursionError) as e:
            ledger.discard()
            self.reverted_count += 1
            logger.warning(
                "Line %d: scrubbing produced invalid JSON, keeping original line",
                line_number,
            )
            return LineResult(text=line, is_json=True, reverted=True, error=str(e))

        ledger.commit()
        return LineResult(text=scrubbed, is_json=True)

    def link_identities(self, data: Any) -> int:
        """Link every username/email pair in ``data``; returns the number of pairs seen."""
        count = 0
        for username, email in iter_user_records(data):
            self.session.link(username, email)
            count += 1
        return count

    def scrub_text(self, text: str, source: str) -> str:
        session = self.session

        result = classifier.replace_emails(
            text, lambda value: session.resolve_email(value, source)
        )
        result = classifier.replace_usernames(
            result, lambda value: session.resolve_username(value, source)
        )
        if session.scrubs_ips:
            result = classifier.replace_ips(
                result, lambda value: session.resolve_ip(value, source)
            )
        if session.scrubs_uids:
            result = classifier.replace_uids(
                result, lambda value: session.resolve_uid(value, source)
            )
        return result

    def _track_json_failure(self, line_number: int, line: str, error: str) -> None:
        self.json_failure_count += 1
        if len(self.json_failures) >= MAX_JSON_FAILURE_SAMPLES:
            return

        # Lines read with surrogateescape may hold lone surrogates that no console can print
        sample = line.encode("utf-8", "backslashreplace").decode("utf-8")
        if len(sample) > JSON_FAILURE_SAMPLE_LENGTH:
            sample = sample[:JSON_FAILURE_SAMPLE_LENGTH] + "..."
        self.json_failures.append(
            JSONFailure(line_number=line_number, error=error, sample_content=sample)
        )
