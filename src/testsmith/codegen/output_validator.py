"""Minimal structural gate for generated Playwright test source."""

import re

from testsmith.codegen.response_normalizer import IMPORT_ANCHOR_RE, TEST_ANCHOR_RE
from testsmith.models import CodeCandidate, ExtractionMethod, ValidationResult

PLAYWRIGHT_IMPORT_RE = IMPORT_ANCHOR_RE
TEST_STRUCTURE_RE = TEST_ANCHOR_RE
FENCE_RE = re.compile(r"^[ \t]*```", re.MULTILINE)

MISSING_IMPORT_REASON = "Generated code does not include a Playwright import/require"
MISSING_STRUCTURE_REASON = "Generated code does not include test structure (test/describe)"
EMPTY_REASON = "Generated code is empty"


class OutputValidator:
    """Checks that a candidate looks like a Playwright test file.

    Substring/pattern checks only; the candidate is never executed or parsed.
    """

    def check(self, candidate: CodeCandidate | str) -> ValidationResult:
        if isinstance(candidate, str):
            source, method = candidate, None
        else:
            source, method = candidate.source, candidate.method

        if not source.strip():
            return ValidationResult(valid=False, reasons=[EMPTY_REASON])

        reasons: list[str] = []
        if not PLAYWRIGHT_IMPORT_RE.search(source):
            reasons.append(MISSING_IMPORT_REASON)
        if not TEST_STRUCTURE_RE.search(source):
            reasons.append(MISSING_STRUCTURE_REASON)

        warnings: list[str] = []
        if method == ExtractionMethod.ANCHORED:
            warnings.append("Code was extracted without fences by anchor scan")
        elif method == ExtractionMethod.RAW:
            warnings.append("Code was taken from the raw reply; no fences or anchors found")
        if FENCE_RE.search(source):
            warnings.append("Code still contains a markdown fence")

        return ValidationResult(valid=not reasons, reasons=reasons, warnings=warnings)
