"""Thin CLI entry point — builds a Manifest and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from speechsplit.engine import process
from speechsplit.errors import SpeechSplitError
from speechsplit.manifest import Manifest, SplitConfig, TranscriptionConfig, load_manifest


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="speechsplit",
        description="speechsplit — extract audio and split it into size-bounded parts.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    split = sub.add_parser("split", parents=[common], help="Split an audio or video file")
    split.add_argument("media", nargs="?", type=Path, help="Input audio or video file")
    split.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    split.add_argument("--max-size-mb", type=float, default=25.0, help="Maximum size of each part (MiB)")
    split.add_argument("--bitrate", type=str, default="64k", help="Audio bitrate of extracted/split files")
    split.add_argument("--transcribe", action="store_true", help="Transcribe the parts with Whisper")
    split.add_argument("--model", type=str, default="base", help="Whisper model size")
    split.add_argument("--language", type=str, default=None, help="Spoken language (auto-detect if omitted)")
    split.add_argument("--format", choices=["txt", "srt", "vtt"], default="txt", help="Transcript output format")

    serve = sub.add_parser("serve", parents=[common], help="Launch the web UI")
    serve.add_argument("--port", type=int, default=8322, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from speechsplit.web import create_app
        app = create_app()
        print(f"speechsplit web UI: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if args.max_size_mb <= 0:
        split.error("--max-size-mb must be positive")

    if not (args.manifest or args.media):
        print("Error: provide either a MEDIA argument or --manifest.", file=sys.stderr)
        sys.exit(1)

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    try:
        result = process(_build_manifest(args), on_progress=on_progress)
    except (SpeechSplitError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! {result.kind.value} file: {result.source}")
    print(f"  Audio: {result.audio.path} ({result.audio.duration:.1f}s)")
    for part in result.parts:
        print(f"  Part: {part.path} ({part.duration:.1f}s, {part.size_bytes} bytes)")
    if result.transcript_path:
        print(f"  Transcript: {result.transcript_path}")


def _build_manifest(args: argparse.Namespace) -> Manifest:
    if args.manifest:
        return load_manifest(args.manifest)
    return Manifest(
        input=args.media,
        split=SplitConfig(max_size_mb=args.max_size_mb, bitrate=args.bitrate),
        transcription=TranscriptionConfig(
            enabled=args.transcribe,
            model=args.model,
            language=args.language,
            output_format=args.format,
        ),
    )
