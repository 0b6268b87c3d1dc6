# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import argparse
import json
import sys
from pathlib import Path

from a11yscan import AccessibilityChecker, ColorContrastChecker
from a11yscan.config import FORMATS, Config
from a11yscan.report import render_text, result_to_dict, validate_report

from . import __version__

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

LEVEL_CHOICES = ["A", "AA", "AAA"]

DEMO_PAIRS = [
    ("#000000", "#FFFFFF", "Black on White"),
    ("#FFFFFF", "#000000", "White on Black"),
    ("#0066CC", "#FFFFFF", "Blue on White"),
    ("#767676", "#FFFFFF", "Gray on White"),
    ("#FF0000", "#FFFFFF", "Red on White"),
]


def _read_text(path_or_dash):
    if path_or_dash == "-":
        return sys.stdin.read()
    path = Path(path_or_dash)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path.resolve()}")
    return path.read_text(encoding="utf-8")


def _load_config(args):
    if getattr(args, "config", None):
        return Config.load(Path(args.config))
    return Config.load()


def _resolve_options(args, config):
    """Merge CLI flags over config values; flags that were not given stay None."""
    disabled = list(config.disabled_rules)
    for rule_id in args.disable or []:
        if rule_id not in disabled:
            disabled.append(rule_id)
    return {
        "level": args.level or config.level.value,
        "format": args.format or config.format,
        "verbose": args.verbose or config.verbose,
        "fail_on_warnings": args.fail_on_warnings or config.fail_on_warnings,
        "disabled_rules": disabled,
        "validate_schema": args.validate_schema,
    }


def run_check(path, options, out=None):
    """Check one file and write the report; returns the process exit code."""
    out = out or sys.stdout
    markup = _read_text(path)
    checker = AccessibilityChecker(options["level"], disabled_rules=options["disabled_rules"])
    result = checker.check_html(markup)
    payload = result_to_dict(result)
    if options.get("validate_schema"):
        validate_report(payload)

    if options["format"] == "json":
        out.write(json.dumps(payload, indent=2, ensure_ascii=True) + "\n")
    else:
        label = "<stdin>" if path == "-" else str(Path(path).resolve())
        out.write(f"Checking file: {label}\n")
        out.write(f"WCAG Level: {result.wcag_level.value}\n\n")
        out.write(render_text(result, verbose=options["verbose"]))

    if not result.passed:
        return EXIT_FAILED
    if options["fail_on_warnings"] and result.warnings:
        return EXIT_FAILED
    return EXIT_OK


def cmd_check(args):
    config = _load_config(args)
    options = _resolve_options(args, config)
    if args.watch:
        if args.file == "-":
            raise ValueError("--watch needs a file path, not stdin")
        from .watcher import cmd_watch

        return cmd_watch(args.file, lambda: run_check(args.file, options))
    return run_check(args.file, options)


def _contrast_lines(result, name=None):
    aa = "pass" if result.passes_aa else "fail"
    aaa = "pass" if result.passes_aaa else "fail"
    lines = [f"{name}:"] if name else []
    lines += [
        f"  Ratio: {result.ratio}:1",
        f"  WCAG AA:  {aa}",
        f"  WCAG AAA: {aaa}",
        f"  Level: {result.wcag_level}",
    ]
    return lines


def cmd_contrast(args):
    result = ColorContrastChecker.check_contrast(args.fg, args.bg, args.font_size, args.bold)
    recommendation = ColorContrastChecker.get_recommended_ratio(args.font_size, args.bold)
    if args.json:
        payload = {
            "schema": "a11yscan.contrast.v1",
            "foreground": args.fg,
            "background": args.bg,
            "font_size": args.font_size,
            "bold": args.bold,
            "recommendation": recommendation,
            **result.to_dict(),
        }
        sys.stdout.write(json.dumps(payload, ensure_ascii=True) + "\n")
    else:
        lines = _contrast_lines(result, f"{args.fg} on {args.bg}")
        lines.append(f"  {recommendation}")
        sys.stdout.write("\n".join(lines) + "\n")
    return EXIT_OK if result.passes_aa else EXIT_FAILED


def cmd_demo_contrast(args):
    sys.stdout.write("Color Contrast Examples\n\n")
    for fg, bg, name in DEMO_PAIRS:
        result = ColorContrastChecker.check_contrast(fg, bg)
        sys.stdout.write("\n".join(_contrast_lines(result, name)) + "\n\n")
    return EXIT_OK


def _build_parser():
    parser = argparse.ArgumentParser(prog="a11yscan", description="WCAG accessibility checker")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--json", action="store_true", help="Emit errors as JSON lines")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Check an HTML file ('-' reads stdin)")
    p_check.add_argument("file")
    p_check.add_argument("--level", type=str.upper, choices=LEVEL_CHOICES,
                         help="WCAG conformance target (default from config, else AA)")
    p_check.add_argument("--format", type=str.lower, choices=list(FORMATS))
    p_check.add_argument("--verbose", action="store_true", default=None,
                         help="Show the offending element for each error")
    p_check.add_argument("--config", help="Path to a11yscan.toml or pyproject.toml")
    p_check.add_argument("--disable", action="append", metavar="RULE_ID",
                         help="Drop issues with this id (repeatable)")
    p_check.add_argument("--fail-on-warnings", action="store_true", default=None)
    p_check.add_argument("--validate-schema", action="store_true",
                         help="Validate the report against the bundled JSON schema")
    p_check.add_argument("--watch", action="store_true", help="Re-check whenever the file changes")
    p_check.set_defaults(func=cmd_check)

    p_contrast = sub.add_parser("contrast", help="Check a foreground/background color pair")
    p_contrast.add_argument("fg")
    p_contrast.add_argument("bg")
    p_contrast.add_argument("--font-size", type=float, default=16.0, help="Font size in points")
    p_contrast.add_argument("--bold", action="store_true")
    p_contrast.set_defaults(func=cmd_contrast)

    p_demo = sub.add_parser("demo-contrast", help="Show reference contrast examples")
    p_demo.set_defaults(func=cmd_demo_contrast)

    return parser


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except Exception as exc:
        if args.json:
            err = {
                "schema": "a11yscan.error.v1",
                "ok": False,
                "code": type(exc).__name__,
                "message": str(exc),
            }
            sys.stderr.write(json.dumps(err, ensure_ascii=True) + "\n")
        else:
            sys.stderr.write(f"[error] {exc}\n")
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
