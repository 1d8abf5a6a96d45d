"""Recover a single source candidate from a raw model reply.

Heuristics, in priority order:
1. Longest fenced code block (language tag optional).
2. Anchor scan: from the first Playwright import/require line (or, failing
   that, the first test/describe call) up to the last closing brace,
   dropping trailing prose.
3. The whole trimmed reply.

This is a heuristic, not a parser. It never raises; degraded results carry
their ExtractionMethod so validation and callers can tell them apart.
"""

import re

from testsmith.models import CodeCandidate, ExtractionMethod

# Opening fence with optional info string, then the body up to the next fence
FENCED_BLOCK_RE = re.compile(r"```[^\n`]*\r?\n(.*?)```", re.DOTALL)
# A line importing a quoted module specifier that names playwright
IMPORT_ANCHOR_RE = re.compile(
    r"""^[ \t]*(?:"""
    r"""import\b[^\n]*?['"][^'"\n]*playwright[^'"\n]*['"]"""
    r"""|(?:(?:const|let|var)\b[^\n]*?)?require\(\s*['"][^'"\n]*playwright[^'"\n]*['"]\s*\)"""
    r""")""",
    re.MULTILINE,
)
# No whitespace before "(": "a test (see docs)" is prose, not a call
TEST_ANCHOR_RE = re.compile(r"\b(?:test|describe)(?:\.\w+)*\(")
# Characters that close the call wrapping the final block, e.g. the ");" in "});"
CLOSING_TAIL_RE = re.compile(r"[)\];]*")


def find_fenced_blocks(reply: str) -> list[str]:
    """Return the interiors of all complete fenced code blocks."""
    return FENCED_BLOCK_RE.findall(reply)


def find_anchor(text: str) -> int:
    """Return the index where source starts, or -1.

    A Playwright import/require line wins over any test/describe call, even
    an earlier one; the call is only used when no import line exists.
    """
    for pattern in (IMPORT_ANCHOR_RE, TEST_ANCHOR_RE):
        match = pattern.search(text)
        if match is not None:
            return match.start()
    return -1


def cut_after_last_brace(code: str) -> str:
    """Drop everything after the last '}' (keeping a trailing ')' / ';')."""
    last_brace = code.rfind("}")
    if last_brace == -1:
        return code.strip()
    end = last_brace + 1
    tail = CLOSING_TAIL_RE.match(code, end)
    if tail is not None:
        end = tail.end()
    return code[:end].strip()


class ResponseNormalizer:
    """Extracts the best candidate source block from a raw reply."""

    def extract(self, reply: str | None) -> CodeCandidate:
        text = reply or ""
        if not text.strip():
            return CodeCandidate(source="", method=ExtractionMethod.EMPTY)

        blocks = find_fenced_blocks(text)
        if blocks:
            # First of equal-length blocks wins (max is stable)
            longest = max(blocks, key=len)
            return CodeCandidate(
                source=longest.strip(),
                method=ExtractionMethod.FENCED,
                block_count=len(blocks),
            )

        anchor = find_anchor(text)
        if anchor != -1:
            return CodeCandidate(
                source=cut_after_last_brace(text[anchor:]),
                method=ExtractionMethod.ANCHORED,
            )

        return CodeCandidate(source=text.strip(), method=ExtractionMethod.RAW)
