"""CLI entry points: one `framescribe` program plus a standalone script per command."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, NoReturn

from framescribe import ffutil
from framescribe.analyzers import frames
from framescribe.analyzers.transcribe import ClipTranscriber
from framescribe.config import Settings, load_settings
from framescribe.fetch import (
    DownloadError,
    UnknownModelError,
    download_model,
    format_catalog,
    progress_line,
    resolve_model,
)
from framescribe.timecode import parse_time_range, parse_timecode

logger = logging.getLogger(__name__)

RULE = "========================"
TIME_HELP = 'Time in seconds (e.g. "120") or clock format (e.g. "2:00", "1:02:03")'


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _timecode(value: str) -> str:
    try:
        parse_timecode(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None
    return value


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        n = 0
    if n <= 0:
        raise argparse.ArgumentTypeError("--count must be a positive integer")
    return n


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# download-model
# ---------------------------------------------------------------------------

def _add_download_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("model", nargs="?", help="Model name, e.g. base.en")
    p.add_argument("--yes", "-y", action="store_true", help="Overwrite an existing file without asking")


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() == "y"


def run_download(args: argparse.Namespace, settings: Settings) -> int:
    if not args.model:
        print("Whisper Model Downloader")
        print("========================\n")
        print("Available models:")
        print("\n".join(format_catalog()))
        print("\nUsage: framescribe download-model <model-name>")
        print("Example: framescribe download-model base.en")
        return 0

    try:
        model = resolve_model(args.model)
    except UnknownModelError as exc:
        print(exc, file=sys.stderr)
        print("\nAvailable models:")
        print("\n".join(format_catalog()))
        return 1

    settings.models_dir.mkdir(parents=True, exist_ok=True)
    dest = settings.models_dir / model.filename

    if dest.exists() and not args.yes:
        print(f"Model {model.name} already exists at: {dest}")
        if not _confirm("Overwrite? (y/N): "):
            print("Download cancelled.")
            return 0

    print(f"Downloading {model.name} model ({model.size})...")
    print(f"URL: {model.url}")
    print(f"Destination: {dest}\n")

    last_percent = -1

    def on_progress(downloaded: int, total: int) -> None:
        nonlocal last_percent
        if total:
            percent = downloaded * 100 // total
            if percent == last_percent:
                return
            last_percent = percent
        print(f"\r{progress_line(downloaded, total)}", end="", flush=True)

    try:
        download_model(model, dest, on_progress=on_progress)
    except DownloadError as exc:
        print(f"\nDownload failed: {exc}", file=sys.stderr)
        return 1

    print("\n\nDownload complete!")
    print(f"Model saved to: {dest}")
    return 0


# ---------------------------------------------------------------------------
# duration
# ---------------------------------------------------------------------------

def _add_duration_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("video", type=Path, help="Input video file")


def run_duration(args: argparse.Namespace, settings: Settings) -> int:
    try:
        ffutil.check_ffmpeg()
        duration = ffutil.probe_duration(args.video)
    except (ffutil.FFmpegNotFoundError, ffutil.FFmpegError) as exc:
        print(f"Error getting video duration: {exc}", file=sys.stderr)
        return 1

    print(f"{duration:.1f}")
    return 0


# ---------------------------------------------------------------------------
# frames
# ---------------------------------------------------------------------------

def _add_range_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("video", type=Path, help="Input video file")
    p.add_argument("start", type=_timecode, help=f"Start time. {TIME_HELP}")
    p.add_argument("end", type=_timecode, help=f"End time. {TIME_HELP}")


def _add_frames_args(p: argparse.ArgumentParser) -> None:
    _add_range_args(p)
    p.add_argument("--count", "-n", type=_positive_int, help="Extract exactly N frames spread across the range")


def run_frames(args: argparse.Namespace, settings: Settings) -> int:
    try:
        time_range = parse_time_range(args.start, args.end)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        ffutil.check_ffmpeg()
        extracted = frames.extract(
            args.video, time_range, count=args.count, config=settings.frames
        )
    except Exception as exc:
        logger.debug("Frame extraction failed", exc_info=True)
        print(f"Error extracting frames: {exc}", file=sys.stderr)
        return 1

    print("\n".join(frames.format_report(extracted, time_range)))
    print()
    return 0


# ---------------------------------------------------------------------------
# transcribe
# ---------------------------------------------------------------------------

def run_transcribe(args: argparse.Namespace, settings: Settings) -> int:
    try:
        time_range = parse_time_range(args.start, args.end)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    from framescribe.recognizer import load_whisper

    transcriber = ClipTranscriber(load_whisper, settings.models_dir, settings.transcribe)

    print("=== AUDIO TRANSCRIPT ===\n")
    try:
        ffutil.check_ffmpeg()
        lines = transcriber.run(args.video, time_range)
    except ffutil.NoAudioStreamError:
        print("No audio stream found in video file.")
        print(f"\n{RULE}\n")
        return 0
    except Exception as exc:
        logger.debug("Transcription failed", exc_info=True)
        print(f"Error transcribing audio: {exc}", file=sys.stderr)
        return 1

    print("\n".join(lines))
    print(f"\n{RULE}\n")
    return 0


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

Handler = Callable[[argparse.Namespace, Settings], int]

# name -> (standalone prog, help, argument builder, handler)
COMMANDS: dict[str, tuple[str, str, Callable[[argparse.ArgumentParser], None], Handler]] = {
    "download-model": ("download-whisper", "Download a Whisper model checkpoint", _add_download_args, run_download),
    "duration": ("get-duration", "Print a video's duration in seconds", _add_duration_args, run_duration),
    "frames": ("extract-frames", "Extract WebP frames from a time range", _add_frames_args, run_frames),
    "transcribe": ("transcribe-clip", "Transcribe the audio of a time range", _add_range_args, run_transcribe),
}


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging on stderr")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="framescribe",
        description="framescribe: frames, durations and transcripts from video files.",
    )
    sub = parser.add_subparsers(dest="command")
    for name, (_, help_text, add_args, handler) in COMMANDS.items():
        p = sub.add_parser(name, help=help_text)
        add_args(p)
        _add_common_args(p)
        p.set_defaults(handler=handler)
    return parser


def _dispatch(parser: argparse.ArgumentParser, argv: list[str] | None) -> int:
    args = parser.parse_args(argv)

    if getattr(args, "handler", None) is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)
    return args.handler(args, load_settings())


def main(argv: list[str] | None = None) -> None:
    sys.exit(_dispatch(build_parser(), argv))


def _standalone(command: str) -> Callable[[list[str] | None], None]:
    prog, help_text, add_args, handler = COMMANDS[command]

    def entry(argv: list[str] | None = None) -> None:
        parser = _Parser(prog=prog, description=help_text)
        add_args(parser)
        _add_common_args(parser)
        parser.set_defaults(handler=handler)
        sys.exit(_dispatch(parser, argv))

    entry.__name__ = f"{command.replace('-', '_')}_main"
    return entry


download_main = _standalone("download-model")
duration_main = _standalone("duration")
frames_main = _standalone("frames")
transcribe_main = _standalone("transcribe")
