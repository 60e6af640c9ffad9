"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(
        prog="raise-engine",
        description="RAISE authorization level and checkpoint engine",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--opportunity",
            type=Path,
            required=True,
            help="Opportunity record (JSON or YAML; a list evaluates each item)",
        )
        sub.add_argument(
            "--settings",
            type=Path,
            default=None,
            help="Settings YAML (matrix, controls, thresholds). Defaults apply when omitted",
        )
        sub.add_argument(
            "--output",
            type=Path,
            default=None,
            help="Write JSON result to file (default: stdout)",
        )

    level_parser = subparsers.add_parser("level", help="Calculate the RAISE level")
    _add_common(level_parser)
    level_parser.add_argument(
        "--show-explanations",
        action="store_true",
        help="Include the rule explanation trail",
    )

    fast_track_parser = subparsers.add_parser("fast-track", help="Check fast-track eligibility")
    _add_common(fast_track_parser)

    for name, help_text in (
        ("checkpoints", "List required checkpoints for a phase"),
        ("assess", "Full assessment: level, fast track, checkpoints, experts"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_common(sub)
        sub.add_argument(
            "--phase",
            type=str,
            default=None,
            help="Workflow phase (default: the opportunity's current phase)",
        )
        sub.add_argument(
            "--test-mode",
            action="store_true",
            help="Make every checkpoint optional (end-to-end test runs)",
        )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "level":
        _run_level(args)
    elif args.command == "fast-track":
        _run_fast_track(args)
    elif args.command == "checkpoints":
        _run_checkpoints(args)
    elif args.command == "assess":
        _run_assess(args)
    else:
        parser.print_help()


def _load_settings(args: argparse.Namespace):
    from raise_engine.settings import EngineSettings, SettingsError

    if args.settings is None:
        return EngineSettings()
    try:
        return EngineSettings.from_yaml(args.settings)
    except SettingsError as e:
        raise SystemExit(str(e))


def _load_opportunities(path: Path) -> list:
    """Read one record or a list of records, validating each."""
    import yaml

    from raise_engine.validation import validate_opportunity

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SystemExit(f"Cannot read opportunity file {path}: {e}")
    except yaml.YAMLError as e:
        raise SystemExit(f"Invalid opportunity file {path}: {e}")

    records = data if isinstance(data, list) else [data]
    opportunities = []
    for index, record in enumerate(records):
        opp, errors = validate_opportunity(record or {})
        if opp is None:
            raise SystemExit(f"Invalid opportunity #{index}: " + "; ".join(errors))
        opportunities.append(opp)
    return opportunities


def _emit(args: argparse.Namespace, payload: list) -> None:
    output = json.dumps(payload if len(payload) != 1 else payload[0], indent=2, default=str)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote {len(payload)} result(s) to {args.output}", file=sys.stderr)
    else:
        print(output)


def _resolve_test_mode(args: argparse.Namespace, settings) -> bool:
    return bool(args.test_mode) or settings.test_mode_active()


def _run_level(args: argparse.Namespace) -> None:
    """Run level command."""
    from raise_engine.authorization import LevelCalculator

    settings = _load_settings(args)
    calculator = LevelCalculator(settings.authorization_matrix, settings.thresholds)
    payload = []
    for opp in _load_opportunities(args.opportunity):
        result = calculator.evaluate(opp)
        item = {"id": opp.id, "level": result.level.value}
        if args.show_explanations:
            item["baseLevel"] = result.base_level.value if result.base_level else None
            item["appliedRules"] = result.applied_rules
            item["explanations"] = result.explanations
        payload.append(item)
    _emit(args, payload)


def _run_fast_track(args: argparse.Namespace) -> None:
    """Run fast-track command."""
    from raise_engine.fast_track import fast_track_inhibitors

    settings = _load_settings(args)
    payload = []
    for opp in _load_opportunities(args.opportunity):
        inhibitors = fast_track_inhibitors(opp, settings.thresholds)
        payload.append({"id": opp.id, "eligible": not inhibitors, "inhibitors": inhibitors})
    _emit(args, payload)


def _run_checkpoints(args: argparse.Namespace) -> None:
    """Run checkpoints command."""
    from raise_engine.checkpoints import get_required_checkpoints

    settings = _load_settings(args)
    test_mode = _resolve_test_mode(args, settings)
    payload = []
    for opp in _load_opportunities(args.opportunity):
        phase = args.phase or opp.current_phase
        checkpoints = get_required_checkpoints(
            phase, opp, settings.controls, test_mode=test_mode
        )
        payload.append(
            {
                "id": opp.id,
                "phase": getattr(phase, "value", phase),
                "checkpoints": [
                    c.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for c in checkpoints
                ],
            }
        )
    _emit(args, payload)


def _run_assess(args: argparse.Namespace) -> None:
    """Run assess command."""
    from raise_engine.pipeline import assess_opportunity

    settings = _load_settings(args)
    test_mode = _resolve_test_mode(args, settings)
    payload = [
        assess_opportunity(opp, settings, phase=args.phase, test_mode=test_mode).model_dump(
            mode="json", by_alias=True, exclude_none=True
        )
        for opp in _load_opportunities(args.opportunity)
    ]
    _emit(args, payload)


if __name__ == "__main__":
    main()
