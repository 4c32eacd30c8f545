"""Command-line entry point

Usage:
    voicestress calibrate TAKE TAKE TAKE
    voicestress analyze TAKE
    voicestress baseline
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from voicestress.analysis.biomarkers import STRESS_TIER_LABELS, split_groups
from voicestress.app import VoiceStressApp
from voicestress.config.config_loader import config
from voicestress.errors import VoiceStressError
from voicestress.models.frames import RecordedTake
from voicestress.models.results import AnalysisResult


logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging from the ``logging`` config section"""
    level = logging.DEBUG if verbose else getattr(logging, str(config.get('logging.level', 'INFO')).upper())
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = config.get('logging.file')
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voicestress",
        description="Voice calibration and stress biomarker analysis.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command")

    calibrate_parser = subparsers.add_parser(
        "calibrate",
        help="Record a calm-voice baseline from calibration takes.",
    )
    calibrate_parser.add_argument("takes", nargs="+", metavar="TAKE",
                                  help="Recorded calibration takes (audio files).")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze one recorded take against the stored baseline.",
    )
    analyze_parser.add_argument("take", metavar="TAKE", help="Recorded take (audio file).")

    subparsers.add_parser("baseline", help="Print the stored baseline JSON.")

    return parser


def load_take(path: str) -> RecordedTake:
    file_path = Path(path)
    mime_type = MIME_TYPES.get(file_path.suffix.lower(), "application/octet-stream")
    return RecordedTake(data=file_path.read_bytes(), mime_type=mime_type)


def format_result(result: AnalysisResult) -> str:
    acoustic, articulation = split_groups(result.biomarkers)
    lines = [
        f"Stress level: {result.stress_level:.0f} / 100 ({STRESS_TIER_LABELS[result.stress_tier]})",
        f"Confidence: {result.confidence:.0f}%   SNR: {result.snr:.1f} dB",
        f"Baseline: {'personal' if result.has_baseline else 'general population'}",
        "",
        "Acoustic:",
    ]
    lines += [f"  [{b.status.value:>6}] {b.name}: {b.formatted_value} ({b.delta_label})" for b in acoustic]
    lines += ["", "Articulation:"]
    lines += [f"  [{b.status.value:>6}] {b.name}: {b.formatted_value} ({b.delta_label})" for b in articulation]
    lines += ["", result.ai_summary]
    return "\n".join(lines)


async def main_async(args: argparse.Namespace) -> int:
    """Async main entry point."""
    for path in ([args.take] if args.command == "analyze" else getattr(args, "takes", [])):
        if not Path(path).exists():
            logger.error(f"Audio file not found: {path}")
            return 1

    app = VoiceStressApp()
    try:
        return await run_command(app, args)
    finally:
        await app.close()


async def run_command(app: VoiceStressApp, args: argparse.Namespace) -> int:
    if args.command == "baseline":
        await app.load_baseline()
        if not app.has_baseline:
            print("No baseline stored. Run 'voicestress calibrate' first.")
            return 1
        print(app.baseline_json)
        return 0

    if args.command == "calibrate":
        # Overwrites the stored baseline without reading it
        baseline_json = await app.calibrate(*(load_take(p) for p in args.takes))
        print("Baseline saved!")
        print(baseline_json)
        return 0

    result = await app.analyze(load_take(args.take))
    if result is None:
        return 1
    print(format_result(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    setup_logging(args.verbose)

    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(main_async(args))
    except VoiceStressError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Application terminated by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
