"""Command-line entry point.

Usage:
    cipherpost encode-text "Hello"
    cipherpost encode-file photo.png photo.pkg
    cipherpost decode-file photo.pkg photo.png
    cipherpost send --from alice@example.com --to bob@example.com --message "hi" [--image photo.png]
    cipherpost view <id> [--image-out out.png]
    cipherpost sent alice@example.com
    cipherpost suggest --from alice@example.com --to bob@example.com --message "hi"
    cipherpost selftest --vectors 200

``send``/``view``/``sent`` talk to the store at REDIS_URL; with the default
``memory://`` nothing outlives the process.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .cipher.pipeline import decode, encode
from .cipher.text import decode_text, encode_text
from .config import load_settings
from .errors import CipherPostError
from .evaluation.roundtrip import run_all_stages
from .llm.assistant import suggest_rewrites
from .messages import Sender, list_sent, open_message, send_message
from .notify import SmtpDispatcher
from .store.ephemeral import open_store
from .store.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cipherpost", description="Ephemeral obfuscated messages")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("encode-text", help="ROT13 a string")
    p.add_argument("text")
    p = sub.add_parser("decode-text", help="Undo ROT13 on a string")
    p.add_argument("text")

    p = sub.add_parser("encode-file", help="Encode a binary file into a package")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p = sub.add_parser("decode-file", help="Decode a package file back to bytes")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)

    p = sub.add_parser("send", help="Store a message and notify the recipient")
    p.add_argument("--from", dest="sender", required=True, help="Sender email")
    p.add_argument("--name", default="", help="Sender display name")
    p.add_argument("--picture", default="", help="Sender picture URL")
    p.add_argument("--to", dest="recipient", required=True, help="Recipient email")
    p.add_argument("--message", required=True)
    p.add_argument("--image", type=Path, default=None)
    p.add_argument("--no-notify", action="store_true", help="Skip the SMTP notification")

    p = sub.add_parser("view", help="Open a stored message")
    p.add_argument("id")
    p.add_argument("--image-out", type=Path, default=None)

    p = sub.add_parser("sent", help="List live messages sent by an owner")
    p.add_argument("owner")

    p = sub.add_parser("suggest", help="Ask the assistant for rewrites")
    p.add_argument("--from", dest="sender", required=True)
    p.add_argument("--to", dest="recipient", required=True)
    p.add_argument("--message", required=True)

    p = sub.add_parser("selftest", help="Round-trip every stage on random payloads")
    p.add_argument("--vectors", type=int, default=200)
    p.add_argument("--max-len", type=int, default=512)
    p.add_argument("--seed", type=int, default=1337)
    return parser


def _run(args: argparse.Namespace) -> int:
    if args.command == "encode-text":
        print(encode_text(args.text))
        return 0
    if args.command == "decode-text":
        print(decode_text(args.text))
        return 0
    if args.command == "encode-file":
        args.output.write_text(encode(args.input.read_bytes()), encoding="ascii")
        return 0
    if args.command == "decode-file":
        args.output.write_bytes(decode(args.input.read_bytes()) or b"")
        return 0

    if args.command == "selftest":
        results = run_all_stages(num_vectors=args.vectors, max_len=args.max_len, seed=args.seed)
        for r in results:
            print(r.summary())
        return 0 if all(r.is_perfect for r in results) else 1

    settings = load_settings()

    if args.command == "suggest":
        with open_store(settings) as store:
            limiter = RateLimiter(
                store.backend,
                limit=settings.rate_limit_requests,
                window_seconds=settings.rate_limit_window_seconds,
            )
            result = suggest_rewrites(
                settings,
                identity=args.sender,
                message=args.message,
                recipient=args.recipient,
                limiter=limiter,
            )
        print(result.model_dump_json(indent=2))
        return 0

    with open_store(settings) as store:
        if args.command == "send":
            dispatcher = None if args.no_notify else SmtpDispatcher(settings)
            message_id = send_message(
                store,
                sender=Sender(email=args.sender, name=args.name, picture=args.picture),
                recipient=args.recipient,
                text=args.message,
                image=args.image.read_bytes() if args.image else None,
                dispatcher=dispatcher,
            )
            print(message_id)
        elif args.command == "view":
            opened = open_message(store, args.id)
            if args.image_out and opened.image is not None:
                args.image_out.write_bytes(opened.image)
            print(json.dumps({
                "id": opened.id,
                "text": opened.text,
                "sender": opened.sender.model_dump(),
                "timestamp": opened.timestamp,
                "has_image": opened.image is not None,
            }, indent=2))
        elif args.command == "sent":
            records = list_sent(store, args.owner)
            print(json.dumps([json.loads(r.to_json()) for r in records], indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return _run(args)
    except (CipherPostError, ValueError) as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
