"""
Command-line interface for shapesnap.

Runs the recognition engine on stroke JSON files for inspection and tuning.
"""

import argparse
import json
import sys

from shapesnap.config import load_config, save_default_config
from shapesnap.tracer import configure_tracer, get_tracer


def _add_stroke_arguments(parser):
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Stroke JSON file: {\"points\": [{\"x\":..,\"y\":..}], \"width\":.., \"sensitivity\":..}",
    )
    parser.add_argument(
        "--sensitivity", "-s",
        type=int,
        default=None,
        help="Override the stroke's sensitivity (0-100)",
    )
    parser.add_argument(
        "--width", "-w",
        type=float,
        default=None,
        help="Override the stroke's width",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the sample-consensus estimators",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--out", "-o",
        default=None,
        help="Write JSON output here instead of stdout",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="shapesnap: recognize freehand strokes as lines, circles and parabolas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    recognize_parser = subparsers.add_parser("recognize", help="Snap a stroke to its best shape")
    _add_stroke_arguments(recognize_parser)

    candidates_parser = subparsers.add_parser("candidates", help="List every acceptable conversion")
    _add_stroke_arguments(candidates_parser)

    diagnose_parser = subparsers.add_parser("diagnose", help="Explain each estimator's verdict")
    _add_stroke_arguments(diagnose_parser)

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="shapesnap_config.yaml",
        help="Output path for config file",
    )
    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init-config":
        return handle_init_config(args)
    return handle_stroke_command(args)


def load_stroke(path, width=None, sensitivity=None, default_sensitivity=50):
    """
    Read a Stroke from JSON, applying command-line overrides.

    Strokes saved without a sensitivity get default_sensitivity.
    """
    from shapesnap.models import Stroke

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    data.setdefault("sensitivity", default_sensitivity)
    if width is not None:
        data["width"] = width
    if sensitivity is not None:
        data["sensitivity"] = sensitivity
    return Stroke.model_validate(data)


def handle_stroke_command(args):
    """Handle recognize, candidates and diagnose."""
    tracer = get_tracer()

    try:
        config = load_config(args.config)
        configure_tracer(
            enabled=args.trace or config.tracing.enabled,
            level=args.trace_level if args.trace else config.tracing.level,
            file_path=args.trace_file or config.tracing.file_path,
            json_output=args.trace_json or config.tracing.json_output,
        )

        from shapesnap.recognize import diagnose_stroke, rank_candidates, recognize_stroke

        stroke = load_stroke(
            args.input, width=args.width, sensitivity=args.sensitivity,
            default_sensitivity=config.default_sensitivity,
        )

        with tracer.span(f"cli_{args.command}", module="cli"):
            if args.command == "recognize":
                result = recognize_stroke(stroke, rng=args.seed, config=config)
                output = result.model_dump_json(indent=2)
                summary = f"Recognized {result.kind.value}" if result.recognized else "Unrecognized"
            elif args.command == "candidates":
                ranked = rank_candidates(
                    stroke.points, stroke.width, stroke.sensitivity, rng=args.seed, config=config,
                )
                output = json.dumps([r.model_dump(mode="json") for r in ranked], indent=2)
                summary = f"{len(ranked)} candidate(s)"
            else:
                report = diagnose_stroke(
                    stroke.points, stroke.width, stroke.sensitivity, rng=args.seed, config=config,
                )
                output = report.model_dump_json(indent=2)
                summary = f"Snapped: {report.snapped.value if report.snapped else 'none'}"

        if args.out:
            with open(args.out, "w", encoding="utf-8") as f:
                f.write(output + "\n")
            print(f"{summary}. Output saved to: {args.out}")
        else:
            print(output)

        return 0

    except Exception as e:
        tracer.event(f"{args.command} failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        configure_tracer(enabled=False)


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
