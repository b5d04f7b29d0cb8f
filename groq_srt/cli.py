"""Command-line interface for the Groq SRT Converter.

WHY: Users need a simple way to turn an audio file into subtitles from the
terminal. The CLI wires the pipeline (pre-flight validation, the Groq
upload, segment filtering, SRT encoding) behind a single command and saves
the result next to the source file.

HOW: Uses argparse for the input file, model, language, and output options.
Runs the async orchestrator via asyncio.run(). Each pipeline state change is
printed as a status line on stderr; the SRT goes to a file, or to stdout
with --stdout.

RULES:
- Positional argument: input audio file path
- API key: --api-key, else GROQ_API_KEY from the environment/.env
- Output naming: {stem}.srt ("output.srt" for an empty stem), numeric suffix
  on conflict (talk-2.srt)
- Status output goes to stderr (not stdout)
- Failures print "Error [<stage>]: <detail>" and exit with status 1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from groq_srt.api.models import WhisperModel
from groq_srt.config import DEFAULT_MODEL, find_api_key
from groq_srt.formatters.srt import srt_filename
from groq_srt.pipeline import Failure, PipelineOrchestrator, PipelineState

_STATE_MESSAGES = {
    PipelineState.VALIDATING: "Checking file and API key...",
    PipelineState.REQUESTING: "Requesting Groq API transcription...",
    PipelineState.TRANSCRIBING: "Converting segments to SRT...",
    PipelineState.SUCCEEDED: "Audio transcribed and converted to SRT.",
}


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _on_state(state: PipelineState) -> None:
    message = _STATE_MESSAGES.get(state)
    if message:
        _status(message)


def _resolve_output_path(file_name: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Users may transcribe the same file twice (e.g. default then turbo).
    Overwriting the first result would lose work.

    RULES:
    - First attempt: {stem}.srt
    - Conflict: {stem}-2.srt, {stem}-3.srt, ...
    """
    base_path = output_dir / file_name
    if not base_path.exists():
        return base_path

    stem = base_path.stem
    counter = 2
    while True:
        candidate = output_dir / "{}-{}.srt".format(stem, counter)
        if not candidate.exists():
            return candidate
        counter += 1


async def _run_pipeline(args: argparse.Namespace) -> int:
    """Run one submission and save or print the result.

    Returns:
        Process exit status.
    """
    input_path = Path(args.input_file).resolve()

    if not input_path.is_file():
        print("Error: File not found: {}".format(input_path), file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not args.stdout and not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        return 1

    content_type, _ = mimetypes.guess_type(input_path.name)
    credential = args.api_key if args.api_key is not None else find_api_key()

    _status("Transcribing {} with {}...".format(input_path.name, args.model))
    orchestrator = PipelineOrchestrator(on_state=_on_state)
    result = await orchestrator.submit(
        input_path.read_bytes(),
        input_path.name,
        credential,
        model=args.model,
        language=args.language,
        content_type=content_type,
    )

    if isinstance(result, Failure):
        print("Error [{}]: {}".format(result.stage.value, result.detail), file=sys.stderr)
        return 1

    if args.stdout:
        sys.stdout.write(result.srt_text)
        sys.stdout.flush()
        return 0

    out_path = _resolve_output_path(srt_filename(input_path.name), output_dir)
    out_path.write_text(result.srt_text, encoding="utf-8")
    _status("Saved: {}".format(out_path))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="groq-srt",
        description="Transcribe an audio file with Groq Whisper and save it as SRT subtitles.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the audio file (.mp3, .wav, .m4a, .ogg, .flac, .opus).",
    )

    parser.add_argument(
        "--model",
        default=DEFAULT_MODEL,
        help="Whisper model: 'default', 'turbo', or a full model id (default: %(default)s).",
    )

    parser.add_argument(
        "--language",
        default=None,
        help="Spoken language ISO 639-1 code. Omit to let the API auto-detect.",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save the .srt file (default: same as input file).",
    )
    output.add_argument(
        "--stdout",
        action="store_true",
        help="Write the SRT to stdout instead of a file.",
    )

    parser.add_argument(
        "--api-key",
        default=None,
        help="Groq API key (default: GROQ_API_KEY from the environment or .env).",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log request and state details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        WhisperModel.parse(args.model)
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    sys.exit(asyncio.run(_run_pipeline(args)))


if __name__ == "__main__":
    main()
