from datetime import datetime

import pytest
from pydantic import SecretStr

from testsmith.files.output_sink import OutputSink
from testsmith.models import Prompt
from testsmith.providers.base import ProviderClient
from testsmith.settings import ProviderConfig

VALID_TEST_SOURCE = """import { test, expect } from '@playwright/test';

test.describe('Login', () => {
  test('user logs in with valid credentials and sees a dashboard', async ({ page }) => {
    await page.goto('/login');
    await page.getByLabel('Email').fill('user@example.com');
    await page.getByLabel('Password').fill('correct-horse');
    await page.getByRole('button', { name: 'Sign in' }).click();
    await expect(page.getByRole('heading', { name: 'Dashboard' })).toBeVisible();
  });
});"""

PROSE_REPLY = "I am sorry, but I need more details about the login page before writing a test."

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5)


class ScriptedProvider(ProviderClient):
    """Provider stub that replays a script of reply texts or exceptions."""

    def __init__(self, script):
        super().__init__(
            ProviderConfig(provider="openai", model="stub-model", api_key=SecretStr("sk-test"))
        )
        self.script = list(script)
        self.calls: list[Prompt] = []
        self.timeouts: list[float | None] = []

    def invoke(self, prompt, timeout=None):
        self.calls.append(prompt)
        self.timeouts.append(timeout)
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return self._reply(item)


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def fence(code: str, lang: str = "javascript") -> str:
    return f"```{lang}\n{code}\n```"


@pytest.fixture
def valid_source():
    return VALID_TEST_SOURCE


@pytest.fixture
def fenced_valid_reply():
    return f"Here is the test file:\n\n{fence(VALID_TEST_SOURCE)}\n\nLet me know if you need changes."


@pytest.fixture
def prose_reply():
    return PROSE_REPLY


@pytest.fixture
def scripted_provider():
    """Factory: scripted_provider(reply_or_exc, ...) -> ScriptedProvider."""

    def _make(*script):
        return ScriptedProvider(script)

    return _make


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sample_prompt():
    return Prompt(
        system_instruction="You write Playwright tests.",
        user_instruction="Write a login test.",
    )


@pytest.fixture
def fixed_sink():
    return OutputSink(now=lambda: FIXED_NOW)
