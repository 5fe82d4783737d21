"""Command-line interface for the Cloze Memorizer.

WHY: Learners and authors need a quick way to try a passage from the
terminal: see it with words blanked, check how it splits into verses,
see which verses are due, and run a practice loop that saves progress
between runs. The CLI wires the core pipeline and PracticeSession
behind a handful of subcommands.

HOW: Uses argparse with four subcommands:
  render    — print the passage with hidden words masked
  segments  — list verses/couplets and the word indices they cover
  due       — list verse review status from a state file
  practice  — interactive loop (harder, easier, show, done, again/hard/easy)
A JSON state file (the persisted ProgressRecord) is read with --state and
written back after practice. Status messages go to stderr; rendered
passages go to stdout so they can be piped.

RULES:
- Passage files are read as UTF-8
- --state is optional for render; required for due and practice
- Configuration/record errors print "Error: ..." to stderr and exit 1
- Ctrl+C exits with status 130 after saving practice state
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from cloze_memorizer import __version__
from cloze_memorizer.config import (
    DEFAULT_INCLUDE_OPTIONAL,
    DEFAULT_KIND,
    LOG_FORMAT,
    load_log_level,
    load_tuning,
)
from cloze_memorizer.core.ir import PassageKind, Quality
from cloze_memorizer.core.scheduler import (
    format_time_until,
    get_due_reviews,
    system_clock,
    time_until_due,
)
from cloze_memorizer.core.tokenizer import tokenize
from cloze_memorizer.formatters import FORMATTERS
from cloze_memorizer.session.models import ProgressRecord, load_record, save_record
from cloze_memorizer.session.practice import PracticeSession

logger = logging.getLogger(__name__)

_PRACTICE_HELP = """Commands:
  h / harder     hide more words
  e / easier     hide fewer words
  s / show       toggle show all
  m / mode       toggle verse mode
  d / done       complete the current verse
  again | hard | easy   grade a review
  b / back       previous verse
  q / quit       save and exit"""


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _read_passage(path_arg: str) -> str:
    path = Path(path_arg)
    if not path.is_file():
        raise ValueError("Passage file not found: {}".format(path))
    return path.read_text(encoding="utf-8")


def _load_state(state_arg: Optional[str]) -> Optional[ProgressRecord]:
    if not state_arg:
        return None
    return load_record(Path(state_arg))


def _open_session(args: argparse.Namespace) -> PracticeSession:
    text = _read_passage(args.passage)
    record = _load_state(getattr(args, "state", None))
    percentage = getattr(args, "percentage", None)
    if record is None and percentage is not None:
        return PracticeSession(
            text,
            kind=args.kind,
            include_optional=args.include_optional,
            percentage=max(0, min(100, percentage)),
        )
    return PracticeSession.from_record(
        text,
        record,
        kind=args.kind,
        include_optional=args.include_optional,
    )


def _render(session: PracticeSession, format_key: str) -> str:
    formatter = FORMATTERS[format_key]()
    return formatter.format(session.view())


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_render(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if args.show_all:
        session.toggle_show_all()
    _status("{} words, {}% hidden{}".format(
        session.total_words,
        session.percentage,
        ", verse mode" if session.segment_mode else "",
    ))
    print(_render(session, args.format))
    return 0


def _cmd_segments(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if session.title is not None:
        print("Title: {}".format(session.title.content.strip()))
    for segment in session.segments:
        indices = session.segment_word_indices.get(segment.number, [])
        expected = sum(1 for t in tokenize(segment.content) if t.is_word)
        first_line = segment.content.strip().split("\n")[0]
        marker = "" if len(indices) == expected else "  (partial match)"
        span = "{}-{}".format(indices[0], indices[-1]) if indices else "-"
        print("{:>3}  words {:<9} {}{}".format(segment.number, span, first_line, marker))
    return 0


def _cmd_due(args: argparse.Namespace) -> int:
    record = load_record(Path(args.state))
    if record is None:
        raise ValueError("State file not found: {}".format(args.state))
    now = args.now if args.now is not None else system_clock()
    progress = record.progress_map()

    due = get_due_reviews(progress, now)
    print("Due now: {}".format(", ".join(str(n) for n in due) if due else "none"))
    for number, p in sorted(progress.items()):
        remaining = time_until_due(p, now)
        when = "learning" if remaining is None else format_time_until(remaining)
        print("  V{}: {}x ({})".format(number, p.completions, when))
    return 0


def _apply_practice_command(session: PracticeSession, command: str) -> bool:
    """Run one practice command. Returns False when the loop should stop."""
    if command in ("q", "quit"):
        return False
    if command in ("h", "harder"):
        session.harder()
    elif command in ("e", "easier"):
        session.easier()
    elif command in ("s", "show"):
        session.toggle_show_all()
    elif command in ("m", "mode"):
        session.toggle_segment_mode()
    elif command in ("d", "done"):
        session.complete_segment()
    elif command in {q.value for q in Quality}:
        session.submit_review_quality(command)
    elif command in ("b", "back"):
        session.previous_segment()
    else:
        _status(_PRACTICE_HELP)
    return True


def _practice_prompt(session: PracticeSession) -> str:
    if not session.segment_mode:
        return "[{}%] > ".format(session.percentage)
    segment = session.current_segment
    label = "V{}".format(segment.number) if segment is not None else "-"
    if session.awaiting_quality is not None:
        return "{} again/hard/easy? > ".format(label)
    if session.reviewing is not None:
        return "{} (review) > ".format(label)
    return "{} > ".format(label)


def _cmd_practice(args: argparse.Namespace) -> int:
    session = _open_session(args)
    state_path = Path(args.state)
    _status(_PRACTICE_HELP)

    try:
        while True:
            print(_render(session, args.format))
            due = session.due_queue()
            if session.segment_mode and due:
                _status("Due for review: {}".format(", ".join(str(n) for n in due)))
            try:
                command = input(_practice_prompt(session)).strip().lower()
            except EOFError:
                break
            if not _apply_practice_command(session, command):
                break
    except KeyboardInterrupt:
        save_record(session.to_record(), state_path)
        _status("\nInterrupted, progress saved to {}".format(state_path))
        return 130

    save_record(session.to_record(), state_path)
    _status("Progress saved to {}".format(state_path))
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_passage_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("passage", help="Path to the passage text file.")
    parser.add_argument(
        "--kind",
        choices=[k.value for k in PassageKind],
        default=DEFAULT_KIND,
        help="How the passage splits into segments (default: %(default)s).",
    )
    parser.add_argument(
        "--include-optional",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_INCLUDE_OPTIONAL,
        help="Practice [OPTIONAL] sections too.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="cloze-memorizer",
        description="Memorize a passage by progressively hiding its words.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default from CLOZE_LOG_LEVEL.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Print the passage with hidden words masked.")
    _add_passage_options(render)
    render.add_argument("--state", help="JSON progress file to restore.")
    render.add_argument("--percentage", type=int, help="Deletion percentage when no state is given.")
    render.add_argument("--format", choices=sorted(FORMATTERS), default="plain_text")
    render.add_argument("--show-all", action="store_true", help="Reveal every hidden word.")
    render.set_defaults(handler=_cmd_render)

    segments = subparsers.add_parser("segments", help="List verses or couplets.")
    _add_passage_options(segments)
    segments.set_defaults(handler=_cmd_segments)

    due = subparsers.add_parser("due", help="Show verse review status from a state file.")
    due.add_argument("--state", required=True, help="JSON progress file.")
    due.add_argument("--now", type=int, help="Evaluate at this epoch ms instead of the clock.")
    due.set_defaults(handler=_cmd_due)

    practice = subparsers.add_parser("practice", help="Interactive practice loop.")
    _add_passage_options(practice)
    practice.add_argument("--state", required=True, help="JSON progress file (created if missing).")
    practice.add_argument("--format", choices=sorted(FORMATTERS), default="plain_text")
    practice.set_defaults(handler=_cmd_practice)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        load_tuning()
        logging.basicConfig(level=load_log_level(args.log_level), format=LOG_FORMAT)
        code = args.handler(args)
    except ValidationError as exc:
        print("Error: Invalid state file: {}".format(exc), file=sys.stderr)
        sys.exit(1)
    except ValueError as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        sys.exit(1)

    sys.exit(code)
