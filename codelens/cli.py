"""CLI entrypoints for codelens commands."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Tuple

from .config import CodeLensConfig, ConfigError, load_config
from .engine import (
    analyze_metrics,
    detect_errors,
    format_code,
    highlight,
    resolve_for_analysis,
    validate_code,
)
from .languages import LanguageTag, display_name, resolve_language, supported_languages
from .logging import configure_logging, get_logger
from .report import ReportRenderer

logger = get_logger(__name__)


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Source file to read, or '-' for stdin.")
    parser.add_argument(
        "-l",
        "--language",
        choices=[tag.value for tag in supported_languages()] + [LanguageTag.AUTO.value],
        default=None,
        help="Language of the source (detected when omitted).",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Emit machine readable JSON.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codelens",
        description="Detect, highlight, check, measure and format source code.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .codelens.yml (defaults to the one next to the source).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser("detect", help="Print the detected language.")
    _add_verbose_option(detect_parser, suppress_default=True)
    _add_source_options(detect_parser)

    highlight_parser = subparsers.add_parser(
        "highlight",
        help="Render the source as HTML with token spans.",
    )
    _add_verbose_option(highlight_parser, suppress_default=True)
    _add_source_options(highlight_parser)

    check_parser = subparsers.add_parser("check", help="Report syntax errors and warnings.")
    _add_verbose_option(check_parser, suppress_default=True)
    _add_source_options(check_parser)
    _add_json_option(check_parser)

    metrics_parser = subparsers.add_parser("metrics", help="Report quality and complexity metrics.")
    _add_verbose_option(metrics_parser, suppress_default=True)
    _add_source_options(metrics_parser)
    _add_json_option(metrics_parser)

    format_parser = subparsers.add_parser("format", help="Reformat the source.")
    _add_verbose_option(format_parser, suppress_default=True)
    _add_source_options(format_parser)
    format_parser.add_argument(
        "--write",
        action="store_true",
        help="Rewrite the file in place instead of printing the result.",
    )
    format_parser.add_argument("--indent-size", type=int, default=None, help="Spaces per indent level.")
    format_parser.add_argument(
        "--use-tabs",
        action="store_true",
        default=None,
        help="Indent with tabs instead of spaces.",
    )
    format_parser.add_argument("--max-line-length", type=int, default=None)
    format_parser.add_argument(
        "--drop-blank-lines",
        action="store_true",
        help="Remove blank lines instead of preserving them.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Quick bracket balance and JSON well-formedness check.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    _add_source_options(validate_parser)
    _add_json_option(validate_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codelens commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        code, filename = _read_source(args.path)
        config = load_config(args.config or _config_anchor(args.path))
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except UnicodeDecodeError as exc:
        logger.debug("Decoding %s failed", args.path, exc_info=True)
        parser.exit(1, f"codelens: {args.path} is not UTF-8 text ({exc.reason} at byte {exc.start})\n")
    except OSError as exc:
        parser.exit(1, f"codelens: cannot read {args.path}: {exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"codelens: {exc}\n")

    language = resolve_for_analysis(code, args.language, filename)
    if language is LanguageTag.AUTO:
        language = config.language or LanguageTag.AUTO
    if language is LanguageTag.AUTO and args.command != "detect":
        language = resolve_language(language)
    logger.debug("Using language %s for %s", language.value, args.path)

    if args.command == "detect":
        print(f"{language.value}\t{display_name(language)}")
    elif args.command == "highlight":
        print(highlight(code, language))
    elif args.command == "check":
        result = detect_errors(code, language, config.diagnostics)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            sys.stdout.write(
                ReportRenderer().diagnostics(result, source=args.path, language=language.value)
            )
        if not result.is_valid:
            parser.exit(1)
    elif args.command == "metrics":
        report = analyze_metrics(code, language)
        if args.json:
            print(json.dumps(report.to_dict(), indent=2))
        else:
            sys.stdout.write(ReportRenderer().metrics(report, source=args.path, language=language.value))
    elif args.command == "format":
        _run_format(parser, args, code, language, config)
    elif args.command == "validate":
        validation = validate_code(code, language)
        if args.json:
            print(json.dumps(validation.to_dict(), indent=2))
        elif validation.is_valid:
            print(f"{args.path}: valid")
        else:
            for issue in validation.issues:
                print(f"{args.path}: {issue.type}: {issue.message} ({issue.suggestion})")
        if not validation.is_valid:
            parser.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_format(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    code: str,
    language: LanguageTag,
    config: CodeLensConfig,
) -> None:
    overrides: dict[str, object] = {}
    if args.indent_size is not None:
        overrides["indent_size"] = args.indent_size
    if args.use_tabs:
        overrides["use_tabs"] = True
    if args.max_line_length is not None:
        overrides["max_line_length"] = args.max_line_length
    if args.drop_blank_lines:
        overrides["preserve_blank_lines"] = False
    try:
        options = replace(config.format, **overrides)
    except ValueError as exc:
        parser.exit(2, f"codelens format: {exc}\n")

    formatted = format_code(code, language, options)
    if args.write and args.path != "-":
        path = Path(args.path)
        if formatted != code:
            path.write_text(formatted, encoding="utf-8")
            print(f"Formatted {_relativize(path)}")
        else:
            print(f"{_relativize(path)} already formatted")
    else:
        sys.stdout.write(formatted if formatted.endswith("\n") else formatted + "\n")


def _read_source(path: str) -> Tuple[str, str | None]:
    if path == "-":
        return sys.stdin.read(), None
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"No such file: {path}")
    return source.read_text(encoding="utf-8"), source.name


def _config_anchor(path: str) -> Path:
    if path == "-":
        return Path.cwd()
    return Path(path).resolve().parent


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
