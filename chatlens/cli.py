"""
chatlens/cli.py
Command-line replay for chatlens.
Feeds a recorded event capture through the extraction engine and prints
every batch it produces.

USAGE:
  python -m chatlens.cli --events capture.jsonl
  python -m chatlens.cli --events capture.jsonl --pretty
  python -m chatlens.cli --events capture.jsonl --config chatlens_config.json
  python -m chatlens.cli --write-config

EXAMPLES:
  # One JSON batch per line, ready for jq
  python -m chatlens.cli --events session.jsonl > batches.jsonl

  # Debug why a screen yields nothing
  python -m chatlens.cli --events session.jsonl --verbose
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from chatlens.capture import read_capture, replay_event
from chatlens.config import EngineSettings, ensure_config, load_config, load_config_file
from chatlens.dispatcher import ChatLensEngine
from chatlens.errors import ConfigError
from chatlens.exporters.serialize import batch_to_json
from chatlens.tree.memory import HandleLedger

logger = logging.getLogger(__name__)

# ANSI colors
GREEN  = '\033[92m'
YELLOW = '\033[93m'
RED    = '\033[91m'
CYAN   = '\033[96m'
RESET  = '\033[0m'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'chatlens',
        description = 'chatlens — replay accessibility captures into structured chat records',
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """
Batches go to stdout, one JSON document each; progress and the summary
go to stderr.
        """
    )

    parser.add_argument(
        '--events', '-e',
        type    = Path,
        help    = 'JSON-lines event capture to replay',
    )
    parser.add_argument(
        '--config', '-c',
        type    = Path,
        default = None,
        help    = 'Config file (default: ./chatlens_config.json if present)',
    )
    parser.add_argument(
        '--pretty', '-p',
        action  = 'store_true',
        help    = 'Indent batch JSON instead of one batch per line',
    )
    parser.add_argument(
        '--write-config',
        action  = 'store_true',
        help    = 'Write the default chatlens_config.json here (if missing) and exit',
    )
    parser.add_argument(
        '--verbose', '-v',
        action  = 'store_true',
        help    = 'Enable debug logging',
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args   = parser.parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    logging.basicConfig(
        level   = logging.DEBUG if args.verbose else logging.INFO,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
        stream  = sys.stderr,
    )

    # ── WRITE CONFIG ─────────────────────────────────────────
    if args.write_config:
        ensure_config(Path.cwd())
        _ok(f"Config ready: {Path.cwd() / 'chatlens_config.json'}")
        return 0

    if args.events is None:
        parser.error('--events is required unless --write-config is given')

    if not args.events.exists():
        _err(f"{RED}Error: Capture not found: {args.events}{RESET}")
        return 1

    # ── SETTINGS ─────────────────────────────────────────────
    try:
        config   = load_config_file(args.config) if args.config else load_config()
        settings = EngineSettings.from_config(config)
    except ConfigError as e:
        _err(f"{RED}Error: {e}{RESET}")
        return 1

    if not args.verbose:
        logging.getLogger().setLevel(settings.log_level)

    _step(f"Replaying {CYAN}{args.events}{RESET} (target: {settings.target_package})")

    # ── REPLAY ───────────────────────────────────────────────
    engine = ChatLensEngine(settings=settings)
    ledger = HandleLedger()
    t0     = time.time()

    for data in read_capture(args.events):
        with replay_event(data, ledger) as event:
            batch = engine.on_event(event)
        if batch is not None:
            print(batch_to_json(batch, indent=2 if args.pretty else None))

    stats = engine.on_interrupt()

    # ── SUMMARY ──────────────────────────────────────────────
    _ok(f"{stats['events']} events replayed in {_elapsed(t0)}")
    _err(f"  Ignored    : {stats['ignored']:,}")
    _err(f"  Batches    : {stats['batches']:,}")
    if ledger.balanced:
        _err(f"  Handles    : {GREEN}{ledger.acquired} acquired / {ledger.released} released{RESET}")
        return 0
    _err(f"  Handles    : {YELLOW}{ledger.outstanding} never released{RESET}")
    return 2


# ── PRINT HELPERS ────────────────────────────────────────────

def _step(msg): _err(f"  {CYAN}→{RESET} {msg}")
def _ok(msg):   _err(f"  {GREEN}✓{RESET} {msg}")
def _err(msg):  print(msg, file=sys.stderr)

def _elapsed(t0: float) -> str:
    s = time.time() - t0
    return f"{s:.1f}s" if s < 60 else f"{int(s//60)}m {int(s%60)}s"


if __name__ == '__main__':
    sys.exit(main())
