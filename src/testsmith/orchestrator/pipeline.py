"""End-to-end generation and repair pipelines.

ContentSource -> PromptBuilder -> RetryController -> OutputSink.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Literal

from testsmith.codegen.output_validator import OutputValidator
from testsmith.codegen.prompt_builder import PromptBuilder
from testsmith.codegen.response_normalizer import ResponseNormalizer
from testsmith.files.content_source import ContentSource
from testsmith.files.output_sink import OutputSink
from testsmith.models import PipelineResult, TaskInput
from testsmith.orchestrator.graph import RetryController
from testsmith.providers.base import ProviderClient
from testsmith.settings import PipelineConfig

logger = logging.getLogger(__name__)


class TestPipeline:
    """Turns task inputs into a validated test file on disk.

    The target file is written at most once per run, and only after the
    candidate passes validation (or validation is skipped by configuration).
    Runs against the same target path must be serialized by the caller.
    """

    __test__ = False  # Not a pytest test class

    def __init__(
        self,
        provider: ProviderClient,
        config: PipelineConfig | None = None,
        source: ContentSource | None = None,
        builder: PromptBuilder | None = None,
        normalizer: ResponseNormalizer | None = None,
        validator: OutputValidator | None = None,
        sink: OutputSink | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider = provider
        self.config = config or PipelineConfig()
        self.source = source or ContentSource()
        self.builder = builder or PromptBuilder(max_input_chars=self.config.max_input_chars)
        self.sink = sink or OutputSink()
        self.controller = RetryController.from_config(
            provider,
            self.config,
            normalizer=normalizer,
            validator=validator,
            sleep=sleep,
            clock=clock,
        )

    def generate(self, description_path: str | Path, output_path: str | Path) -> PipelineResult:
        """Generate a new test file from a plain-text description.

        Raises:
            InputError: If the description is missing, empty or too large.
            GenerationFailed: If no valid candidate was produced.
            OutputError: If the backup or write fails.
        """
        task = self.source.load_generation_task(description_path, output_path)
        return self._run("generate", task, Path(output_path))

    def repair(self, test_path: str | Path, log_path: str | Path) -> PipelineResult:
        """Rewrite a failing test file using its error log.

        Raises:
            InputError: If either input is missing, empty or too large.
            GenerationFailed: If no valid candidate was produced.
            OutputError: If the backup or write fails.
        """
        task = self.source.load_repair_task(test_path, log_path)
        return self._run("repair", task, Path(test_path))

    def _run(
        self,
        mode: Literal["generate", "repair"],
        task: TaskInput,
        target: Path,
    ) -> PipelineResult:
        prompt = self.builder.build(task)
        logger.debug("Built %s prompt (%d chars)", mode, len(prompt.user_instruction))

        outcome = self.controller.run(prompt)
        written = self.sink.write(
            target,
            outcome.candidate,
            backup=self.config.backup,
            dry_run=self.config.dry_run,
        )

        return PipelineResult(
            mode=mode,
            target_path=str(target),
            source=outcome.candidate.source,
            wrote=written.wrote,
            dry_run=written.dry_run,
            backup=written.backup,
            attempts=outcome.attempts,
        )
