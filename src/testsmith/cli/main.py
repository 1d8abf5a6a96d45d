"""CLI entry point for testsmith."""
import argparse
import json
import logging
import sys
import traceback

from dotenv import load_dotenv

from testsmith.codegen.exceptions import CodegenError
from testsmith.files.exceptions import InputError, OutputError
from testsmith.orchestrator.exceptions import GenerationFailed, OrchestratorError
from testsmith.providers.exceptions import CredentialMissing, ProviderError
from testsmith.settings import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    SUPPORTED_PROVIDERS,
    PipelineConfig,
)

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_CREDENTIAL_ERROR = 2
EXIT_GENERATION_FAILED = 3
EXIT_OUTPUT_ERROR = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

DRY_RUN_HEADER = "--- Suggested file content (dry run) ---"
DRY_RUN_FOOTER = "--- End suggested file content ---"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--provider",
        choices=SUPPORTED_PROVIDERS,
        default=None,
        help="LLM provider (default: $TESTSMITH_PROVIDER or openai)",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model ID override (default: the provider's default model)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="API key (default: the provider's environment variable)",
    )
    parser.add_argument(
        "--backup",
        dest="backup",
        action="store_true",
        default=True,
        help="Make a timestamped backup before overwriting (default)",
    )
    parser.add_argument(
        "--no-backup",
        dest="backup",
        action="store_false",
        help="Do not create a backup",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated file without writing changes",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help=f"Maximum generation attempts (default: {DEFAULT_MAX_ATTEMPTS})",
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        default=DEFAULT_RETRY_DELAY,
        help=f"Seconds to wait between attempts (default: {DEFAULT_RETRY_DELAY})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall time limit in seconds across all attempts (default: none)",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Accept any non-empty candidate without structural checks",
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output the run result as JSON"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="testsmith",
        description="Generate and repair Playwright tests with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate a test from a plain-language description
  testsmith generate --input test-inputs/module-A/login.txt \\
      --output playwright-tests/module-A/login.spec.js

  # Repair a failing test from its error log
  testsmith repair --test playwright-tests/example.spec.ts \\
      --log test-inputs/last_failure.log --model gpt-4o-mini

Environment:
  OPENAI_API_KEY, PERPLEXITY_API_KEY, GEMINI_API_KEY, ANTHROPIC_API_KEY
  TESTSMITH_PROVIDER, TESTSMITH_MODEL
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser(
        "generate", help="Generate a Playwright test from a description file"
    )
    generate_parser.add_argument(
        "--input", required=True, help="Plain-text test description file"
    )
    generate_parser.add_argument(
        "--output", required=True, help="Path of the test file to write"
    )
    _add_common_arguments(generate_parser)

    repair_parser = subparsers.add_parser(
        "repair", help="Fix a failing Playwright test using its error log"
    )
    repair_parser.add_argument(
        "--test", required=True, help="Path to the failed test file to fix"
    )
    repair_parser.add_argument(
        "--log", required=True, help="Path to the error log describing the failure"
    )
    _add_common_arguments(repair_parser)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not verbose:
        # SDK transport logs are noise at INFO
        for name in ("httpx", "httpcore", "openai", "anthropic", "google_genai"):
            logging.getLogger(name).setLevel(logging.WARNING)


def build_pipeline_config(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        max_attempts=args.max_attempts,
        retry_delay=args.retry_delay,
        run_timeout=args.timeout,
        backup=args.backup,
        dry_run=args.dry_run,
        skip_validation=args.skip_validation,
    )


def create_pipeline(args: argparse.Namespace):
    """Create the provider and pipeline from CLI arguments.

    Provider imports are deferred to keep --help fast.

    Raises:
        CredentialMissing: If no usable API key is configured.
        ValueError: If the provider name is unsupported.
    """
    from testsmith.orchestrator.pipeline import TestPipeline
    from testsmith.providers.factory import create_provider
    from testsmith.settings import resolve_provider_config

    provider_config = resolve_provider_config(
        provider=args.provider,
        model=args.model,
        api_key=args.api_key,
    )
    provider = create_provider(provider_config)
    return TestPipeline(provider, build_pipeline_config(args))


def print_result_human(result) -> None:
    """Print a pipeline result in human-readable format."""
    if result.dry_run:
        print(f"\n{DRY_RUN_HEADER}\n")
        print(result.source)
        print(f"\n{DRY_RUN_FOOTER}\n")
    if result.backup is not None:
        print(f"Backup created at: {result.backup.backup_path}")
    if result.wrote:
        verb = "Overwrote" if result.mode == "repair" else "Saved test to"
        print(f"{verb} {result.target_path}")
    print(f"Attempts: {len(result.attempts)}")


def format_result_json(result) -> str:
    return json.dumps(result.model_dump(), indent=2, default=str)


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_INVALID_INPUT

    configure_logging(args.verbose)

    try:
        try:
            pipeline = create_pipeline(args)
        except ValueError as exc:
            return _handle_error("Configuration error", exc, args.verbose, EXIT_CREDENTIAL_ERROR)

        if args.command == "generate":
            result = pipeline.generate(args.input, args.output)
        else:
            result = pipeline.repair(args.test, args.log)

        if args.output_json:
            print(format_result_json(result))
        else:
            print_result_human(result)
        return EXIT_SUCCESS

    except InputError as exc:
        return _handle_error("Input error", exc, args.verbose, EXIT_INVALID_INPUT)

    except CredentialMissing as exc:
        return _handle_error("Credential error", exc, args.verbose, EXIT_CREDENTIAL_ERROR)

    except GenerationFailed as exc:
        return _handle_error("Generation failed", exc, args.verbose, EXIT_GENERATION_FAILED)

    except (ProviderError, CodegenError, OrchestratorError) as exc:
        return _handle_error("Generation error", exc, args.verbose, EXIT_GENERATION_FAILED)

    except OutputError as exc:
        return _handle_error("Output error", exc, args.verbose, EXIT_OUTPUT_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
