"""cbor7049 command-line interface.

Usage:
    echo '{"a": [1, 2.5, true]}' | python3 -m cbor7049 encode [--format hex]
    echo 'oWFhgwH7QAQAAAAAAAD1' | python3 -m cbor7049 decode [--format base64]
    python3 -m cbor7049 decode --format raw --input payload.cbor --all
    python3 -m cbor7049 version

Set CBOR7049_LOG_LEVEL=DEBUG to see tag registration and I/O details.
"""

from __future__ import annotations

import argparse
import base64
import binascii
import json
import logging
import os
import sys
from typing import List, Optional

from . import CborError, __version__, default_codec
from ._json_adapter import dumps_json, json_to_value

logger = logging.getLogger(__name__)

FORMATS = ("base64", "hex", "raw")


def _configure_logging() -> None:
    level = os.environ.get("CBOR7049_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cbor7049",
        description="Convert between JSON and CBOR (RFC 7049)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="JSON in, CBOR out")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    enc_p.add_argument("--format", "-f", choices=FORMATS, default="base64",
                       help="Output encoding for the CBOR bytes (default: base64)")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="CBOR in, JSON out")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read CBOR from FILE instead of stdin")
    dec_p.add_argument("--format", "-f", choices=FORMATS, default="base64",
                       help="Input encoding of the CBOR bytes (default: base64)")
    dec_p.add_argument("--all", action="store_true",
                       help="Treat input as a CBOR sequence and emit a JSON array")
    dec_p.add_argument("--indent", type=int, default=None,
                       help="Pretty-print JSON with this indent")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("cbor7049: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _unwrap(raw: bytes, fmt: str) -> bytes:
    if fmt == "raw":
        return raw
    text = b"".join(raw.split())
    if fmt == "hex":
        return binascii.unhexlify(text)
    return base64.b64decode(text, validate=True)


def _cmd_encode(args: argparse.Namespace) -> None:
    value = json_to_value(_read_input(args.input))
    data = default_codec.encode(value)
    logger.debug("encoded %d byte(s)", len(data))

    if args.format == "raw":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    elif args.format == "hex":
        print(data.hex())
    else:
        print(base64.b64encode(data).decode("ascii"))


def _cmd_decode(args: argparse.Namespace) -> None:
    data = _unwrap(_read_input(args.input), args.format)
    logger.debug("decoding %d byte(s)", len(data))
    if args.all:
        value = default_codec.decode_all(data)
    else:
        value = default_codec.decode(data)
    print(dumps_json(value, indent=args.indent))


def main(argv: Optional[List[str]] = None) -> None:
    _configure_logging()
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"cbor7049 {__version__}")
        return

    try:
        if args.command == "encode":
            _cmd_encode(args)
        elif args.command == "decode":
            _cmd_decode(args)
    except CborError as e:
        print(f"cbor7049: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except RecursionError:
        print("cbor7049: error: input is nested too deeply", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"cbor7049: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)
    except (ValueError, binascii.Error) as e:
        print(f"cbor7049: bad input: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
