from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ballotcheck.config import load_settings
from ballotcheck.control_elements import parse_control_elements
from ballotcheck.errors import VerificationError
from ballotcheck.presentation import error_message, render_outcome, unknown_error_message
from ballotcheck.verification import VerificationController, VerificationMode


def _read_text(src: str) -> str:
    if src == "-":
        return sys.stdin.read()
    return Path(src).read_text(encoding="utf-8-sig")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="ballotcheck",
        description="Verify a cast ballot from its control elements (integrity or presence control)",
    )
    ap.add_argument("mode", help="integrity | presence")
    ap.add_argument(
        "--control-elements",
        default="-",
        help="File holding the pasted control elements JSON ('-' reads stdin)",
    )
    ap.add_argument("--config", default=None, help="Optional YAML settings file")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        mode = VerificationMode.from_discriminator(args.mode)
        settings = load_settings(Path(args.config) if args.config else None)
    except VerificationError as e:
        print(error_message(e), file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[ballotcheck] cannot read config file {args.config}: {e}", file=sys.stderr)
        return 2

    try:
        elements = parse_control_elements(_read_text(args.control_elements))
    except VerificationError as e:
        print(error_message(e), file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[ballotcheck] cannot read control elements: {e}", file=sys.stderr)
        return 2

    try:
        outcome = VerificationController(settings=settings).run(mode, elements)
    except Exception as e:
        logging.getLogger(__name__).exception("unexpected failure")
        print(unknown_error_message(e), file=sys.stderr)
        return 1

    print(render_outcome(outcome), file=sys.stdout if outcome.succeeded else sys.stderr)
    return 0 if outcome.succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())
