# ==============================================
# CLI - Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Provides command-line interface to run an inference.
#   This is how users interact with the system.
#
# COMMANDS:
# ---------
# 1. Infer the schema of a collection (sampled client-side):
#    python -m schema_sampler.cli infer --collection users
#
# 2. Let MongoDB run the whole aggregation:
#    python -m schema_sampler.cli infer --collection users --server-side
#
# 3. Restrict the sample and print JSON:
#    python -m schema_sampler.cli infer --query '{"active": true}' --json
#
# Flags override values loaded from the environment / .env.
# Ctrl+C stops the run without requesting further batches.
#
# EXIT CODES:
# -----------
#   0 success, 1 inference/config error, 130 cancelled
#
# ==============================================

import argparse
import asyncio
import json
import signal
import sys
import time
from dataclasses import replace
from typing import List, Optional

from schema_sampler.config import AppConfig, get_config, parse_query
from schema_sampler.errors import InferenceCancelled, SchemaSamplerError
from schema_sampler.schema_inference import InferenceResult, SchemaInference
from schema_sampler.storage.mongo_client import MongoDocumentStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema_sampler",
        description="Infer the top-level schema of a MongoDB collection from a random sample"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    infer = subparsers.add_parser("infer", help="Sample a collection and print its schema")
    infer.add_argument("--uri", help="MongoDB connection string (overrides host/port)")
    infer.add_argument("--database", help="Database name")
    infer.add_argument("--collection", help="Collection name")
    infer.add_argument("--sample-size", type=int, help="Minimum sample size (default 10000)")
    infer.add_argument("--query", help='JSON filter applied before sampling, e.g. \'{"type": "a"}\'')
    infer.add_argument("--server-side", action="store_true", default=None,
                       help="Run the aggregation inside MongoDB")
    infer.add_argument("--per-field-results", action="store_true",
                       help="Server-side only: stream one result record per field")
    infer.add_argument("--json", action="store_true", help="Print the result as JSON")
    infer.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return a copy of config with command line flags applied."""
    mongo = config.mongo
    if args.uri:
        mongo = replace(mongo, uri=args.uri)
    if args.database:
        mongo = replace(mongo, database=args.database)
    if args.collection:
        mongo = replace(mongo, collection=args.collection)

    sampling = config.sampling
    if args.sample_size is not None:
        sampling = replace(sampling, default_sample_size=args.sample_size)
    if args.query is not None:
        sampling = replace(sampling, query=parse_query(args.query))
    if args.server_side:
        sampling = replace(sampling, server_side=True)
    if args.per_field_results:
        sampling = replace(sampling, group_results=False)

    verbose = config.verbose and not args.quiet and not args.json
    return AppConfig(mongo=mongo, sampling=sampling, verbose=verbose)


def format_result(result: InferenceResult) -> str:
    width = max((len(name) for name in result.aggregate), default=5)
    lines = [f"{'FIELD'.ljust(width)}  TYPES"]
    for record in result.aggregate.to_records():
        lines.append(f"{record['field'].ljust(width)}  {', '.join(record['types'])}")
    return "\n".join(lines)


async def run_infer(config: AppConfig) -> InferenceResult:
    start = time.perf_counter()
    cancel_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except (NotImplementedError, RuntimeError):
        # Windows event loops; Ctrl+C falls back to KeyboardInterrupt
        pass

    async with MongoDocumentStore.from_config(config.mongo, verbose=config.verbose) as store:
        if config.verbose:
            print(f"Initial setup: {time.perf_counter() - start:.3f}s")
        inference = SchemaInference(store, config)
        result = await inference.infer(cancel_event)

    if config.verbose:
        for phase, seconds in result.timings.items():
            print(f"{phase}: {seconds:.3f}s")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_overrides(get_config(), args)
        result = asyncio.run(run_infer(config))
    except InferenceCancelled:
        print("\n⚠ Interrupted by user", file=sys.stderr)
        return 130
    except KeyboardInterrupt:
        print("\n⚠ Interrupted by user", file=sys.stderr)
        return 130
    except SchemaSamplerError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
