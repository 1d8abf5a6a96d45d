"""Tests for OutputValidator structural checks."""

import pytest

from testsmith.codegen.output_validator import (
    EMPTY_REASON,
    MISSING_IMPORT_REASON,
    MISSING_STRUCTURE_REASON,
    OutputValidator,
)
from testsmith.models import CodeCandidate, ExtractionMethod


@pytest.fixture
def validator():
    return OutputValidator()


def make_candidate(source: str, method: ExtractionMethod = ExtractionMethod.FENCED) -> CodeCandidate:
    return CodeCandidate(source=source, method=method, block_count=1)


def test_valid_candidate(validator, valid_source):
    result = validator.check(make_candidate(valid_source))
    assert result.valid is True
    assert result.reasons == []
    assert result.warnings == []


def test_missing_import_reason_mentions_import(validator):
    source = "test('a', async ({ page }) => {\n  await page.goto('/');\n});"
    result = validator.check(make_candidate(source))
    assert result.valid is False
    assert result.reasons == [MISSING_IMPORT_REASON]
    assert "import" in result.reasons[0]


def test_missing_test_structure(validator):
    source = "import { chromium } from 'playwright';\nconst browser = await chromium.launch();"
    result = validator.check(make_candidate(source))
    assert result.valid is False
    assert result.reasons == [MISSING_STRUCTURE_REASON]


def test_prose_fails_both_checks_in_order(validator, prose_reply):
    result = validator.check(make_candidate(prose_reply, ExtractionMethod.RAW))
    assert result.valid is False
    assert result.reasons == [MISSING_IMPORT_REASON, MISSING_STRUCTURE_REASON]


def test_prose_about_importing_playwright_is_rejected(validator):
    prose = (
        "To fix it, import the helpers from playwright and wrap the steps "
        "in a test (see the docs)."
    )
    result = validator.check(make_candidate(prose, ExtractionMethod.RAW))
    assert result.valid is False
    assert result.reasons == [MISSING_IMPORT_REASON, MISSING_STRUCTURE_REASON]


def test_import_must_start_a_line(validator):
    source = "// see: import { test } from '@playwright/test';\ntest('x', async () => {});"
    result = validator.check(source)
    assert result.valid is False
    assert result.reasons == [MISSING_IMPORT_REASON]


@pytest.mark.parametrize(
    "source",
    [
        "import { test as base } from '@playwright/test';\nbase('x', async () => {});\ntest.describe('y', () => {});",
        "import '@playwright/test';\ndescribe('x', () => {});",
        "import { test } from '@playwright/test';\ntest('x', async () => {});",
        "const { test } = require('@playwright/test');\ndescribe('x', () => {});",
        "import { test } from '@playwright/test';\ntest.describe('x', () => {});",
        "import { test } from '@playwright/test';\ntest.only('x', async () => {});",
    ],
)
def test_import_and_structure_variants(validator, source):
    assert validator.check(source).valid is True


def test_empty_candidate(validator):
    result = validator.check(make_candidate("  ", ExtractionMethod.EMPTY))
    assert result.valid is False
    assert result.reasons == [EMPTY_REASON]


def test_degraded_extraction_is_a_warning_not_a_failure(validator, valid_source):
    result = validator.check(make_candidate(valid_source, ExtractionMethod.ANCHORED))
    assert result.valid is True
    assert any("anchor" in w for w in result.warnings)


def test_stray_fence_warns(validator, valid_source):
    result = validator.check(make_candidate(f"{valid_source}\n```"))
    assert result.valid is True
    assert any("fence" in w for w in result.warnings)


def test_accepts_plain_string(validator, valid_source):
    assert validator.check(valid_source).valid is True
