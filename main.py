#!/usr/bin/env python3
"""
audiokit CLI
Inspect, cut and join audio files.

Usage:
    python main.py info take.wav other.flac
    python main.py slice take.wav intro.wav --from 0 --duration 2.5
    python main.py slice take.wav left.wav --channels 0
    python main.py join a.wav b.wav c.flac -o joined.wav
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from tqdm import tqdm

from audiokit.core import Audio
from audiokit.errors import AudioError
from audiokit.printer import OutputPrinter
from audiokit.utils import validate_output_path


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="audiokit",
        description="Inspect, cut and join audio files in memory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  audiokit info take.wav
  audiokit slice take.wav tail.wav --duration -3
  audiokit slice take.wav right.wav --channels 1
  audiokit join intro.wav take.wav outro.wav -o full.wav

Selections:
  --from 1.5 --duration 2   two seconds starting at 1.5s
  --duration -3             the last three seconds
  --from 10 --duration -2   the two seconds before 10s
        """,
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress all output except errors.")
    parser.add_argument(
        "--no-color",
        "-n",
        action="store_true",
        help="Disable colored output (also auto-disabled when NO_COLOR env var is set).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log cache and I/O activity.")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    info = commands.add_parser("info", help="Print channels, sample rate and duration.")
    info.add_argument("inputs", metavar="INPUT", nargs="+", help="Audio files or URLs.")

    cut = commands.add_parser("slice", help="Write a time/channel selection to a new file.")
    cut.add_argument("input", metavar="INPUT", help="Audio file or URL.")
    cut.add_argument("output", metavar="OUTPUT", help="Output file (.wav, .mp3, .flac, .ogg, .m4a).")
    cut.add_argument("--from", dest="start", type=float, default=None, metavar="SECONDS",
                     help="Selection start; negative counts from the end (default: 0).")
    cut.add_argument("--duration", type=float, default=None, metavar="SECONDS",
                     help="Selection length; negative selects backward (default: to the end).")
    cut.add_argument("--channels", type=str, default=None, metavar="LIST",
                     help="Comma-separated channel indices, e.g. 0,1 (default: all).")

    join = commands.add_parser("join", help="Concatenate inputs end to end.")
    join.add_argument("inputs", metavar="INPUT", nargs="+", help="Audio files or URLs, in order.")
    join.add_argument("--output", "-o", required=True, metavar="OUTPUT", help="Output file.")

    return parser


def _source(name: str) -> str:
    # The library resolves relative names against the calling file; the CLI
    # means the working directory.
    return name if "://" in name else os.path.abspath(name)


async def _load_all(names: List[str], quiet: bool) -> List[Audio]:
    with tqdm(total=len(names), desc="Loading", unit="file", disable=quiet) as pbar:
        futures = [Audio.load(_source(name)) for name in names]
        for future in futures:
            future.add_done_callback(lambda _: pbar.update(1))
        return await asyncio.gather(*futures)


def cmd_info(args: argparse.Namespace, printer: OutputPrinter) -> None:
    audios: List[Audio] = asyncio.run(_load_all(args.inputs, args.quiet))
    for name, audio in zip(args.inputs, audios):
        printer.success(name, OutputPrinter.describe(audio))


def cmd_slice(args: argparse.Namespace, printer: OutputPrinter) -> None:
    validate_output_path(args.output)

    options: dict = {}
    if args.channels:
        options["channels"] = [int(c) for c in args.channels.split(",") if c.strip()]

    audio: Audio = asyncio.run(_load_all([args.input], args.quiet))[0]
    piece: Audio = audio.slice(args.start, args.duration, options)
    piece.save(os.path.abspath(args.output))
    printer.success(args.output, OutputPrinter.describe(piece))


def cmd_join(args: argparse.Namespace, printer: OutputPrinter) -> None:
    validate_output_path(args.output)

    audios: List[Audio] = asyncio.run(_load_all(args.inputs, args.quiet))
    joined: Audio = Audio.join(*audios)
    joined.save(os.path.abspath(args.output))
    printer.success(args.output, OutputPrinter.describe(joined))


COMMANDS = {
    "info": cmd_info,
    "slice": cmd_slice,
    "join": cmd_join,
}


def main(argv: Optional[List[str]] = None) -> None:
    parser: argparse.ArgumentParser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    printer: OutputPrinter = OutputPrinter(quiet=args.quiet, no_color=args.no_color)

    try:
        COMMANDS[args.command](args, printer)
    except (AudioError, FileNotFoundError, ValueError) as exc:
        printer.error(str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        printer.warning("Cancelled.", hint="No output file was written.")
        sys.exit(130)


if __name__ == "__main__":
    main()
