"""CLI entry point for offline replay and serving.

Usage:
    python -m txnguard score transactions.jsonl
    python -m txnguard score - < transactions.jsonl
    python -m txnguard serve --host 127.0.0.1 --port 8000
"""

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable
from typing import TextIO

from txnguard.config import settings
from txnguard.domains.fraud.config import FraudConfig
from txnguard.domains.fraud.errors import ValidationError
from txnguard.domains.fraud.scorer import FraudScorer
from txnguard.domains.fraud.store import InMemoryProfileStore, ProfileStore
from txnguard.shared.logging import setup_logging


async def replay(
    lines: Iterable[str],
    scorer: FraudScorer,
    store: ProfileStore,
    out: TextIO,
) -> tuple[int, int]:
    """Score JSON-lines transactions in order. Returns (scored, rejected_lines)."""
    scored = 0
    bad = 0
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            print(f"line {lineno}: invalid JSON ({exc.msg})", file=sys.stderr)
            bad += 1
            continue
        try:
            transaction = await scorer.score_transaction(payload, store)
        except ValidationError as exc:
            print(f"line {lineno}: {exc}", file=sys.stderr)
            bad += 1
            continue
        out.write(json.dumps(transaction.model_dump(mode="json")) + "\n")
        scored += 1
    return scored, bad


def _score(args: argparse.Namespace) -> int:
    config = FraudConfig.from_env()
    scorer = FraudScorer(config=config)
    store = InMemoryProfileStore(config=config)

    if args.input == "-":
        scored, bad = asyncio.run(replay(sys.stdin, scorer, store, sys.stdout))
    else:
        with open(args.input) as f:
            scored, bad = asyncio.run(replay(f, scorer, store, sys.stdout))

    print(f"Scored {scored} transactions ({bad} skipped)", file=sys.stderr)
    return 1 if bad and args.strict else 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("txnguard.main:app", host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="txnguard fraud scoring")
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Replay a JSON-lines file of transactions")
    score.add_argument("input", help="Path to a .jsonl file, or - for stdin")
    score.add_argument(
        "--strict", action="store_true", help="Exit non-zero if any line was skipped"
    )
    score.set_defaults(func=_score)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)
    serve.set_defaults(func=_serve)

    args = parser.parse_args(argv)
    log_format = "console" if args.command == "score" else settings.log_format
    setup_logging(settings.log_level, fmt=log_format)
    return args.func(args)
