"""testsmith - LLM-backed Playwright test generation and repair.

Generation mode turns a plain-language test description into a Playwright
test file. Repair mode rewrites a failing test using its error log.

Quick Start:
    ```python
    from testsmith import PipelineConfig, TestPipeline, create_provider, resolve_provider_config

    provider = create_provider(resolve_provider_config("openai"))
    pipeline = TestPipeline(provider, PipelineConfig(backup=True))

    pipeline.generate("test-inputs/login.txt", "playwright-tests/login.spec.js")
    pipeline.repair("playwright-tests/login.spec.js", "test-results/last_failure.log")
    ```
"""

from testsmith.orchestrator import GenerationFailed, RetryController, TestPipeline
from testsmith.providers import ProviderClient, create_provider
from testsmith.settings import PipelineConfig, ProviderConfig, resolve_provider_config

__version__ = "0.1.0"

__all__ = [
    "GenerationFailed",
    "PipelineConfig",
    "ProviderClient",
    "ProviderConfig",
    "RetryController",
    "TestPipeline",
    "create_provider",
    "resolve_provider_config",
]
