"""
Command-line interface.

    gannicus generate schema.yaml -n 100 --provider ollama --model qwen2.5:7b -o users.csv
    gannicus estimate schema.yaml -n 10000
    gannicus init
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from .errors import GannicusError
from .generator import AdvancedOptions, GenerateOptions, generate, generate_fast
from .output import FORMATS, export_records, format_records
from .schema import LLMField, load_schema
from .utils.cost import compare_providers, estimate_cost, format_cost_estimate
from .utils.llm import ProviderConfig, get_model_for_use_case

logger = logging.getLogger(__name__)

EXAMPLE_SCHEMA = """\
fields:
  name:
    type: llm
    prompt: A realistic full name
  age:
    type: number
    min: 18
    max: 65
  role:
    type: enum
    options:
      - value: User
        weight: 70
      - value: Admin
        weight: 25
      - value: Owner
        weight: 5
  label:
    type: derived
    depends: [name, role]
    template: "{name} ({role})"
  bio:
    type: llm
    prompt: A one-sentence professional bio
    coherence: [name, role]
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gannicus",
        description="LLM-powered synthetic data generation",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", aliases=["gen"], help="Generate records from a schema file")
    gen.add_argument("schema", type=Path, help="Schema file (YAML or JSON)")
    gen.add_argument(
        "-n", "--count",
        type=int,
        default=10,
        help="Number of records (default: 10)",
    )
    gen.add_argument(
        "--provider",
        type=str,
        default="ollama",
        help="Backend name (default: ollama)",
    )
    gen.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model to use (backend default if omitted)",
    )
    gen.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Backend endpoint override",
    )
    gen.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible number/enum values",
    )
    gen.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Coalesce identical requests into batches of this size",
    )
    gen.add_argument(
        "--max-retries",
        type=int,
        default=3,
        help="Retries per backend call (default: 3)",
    )
    gen.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-attempt backend timeout in seconds",
    )
    gen.add_argument(
        "--fast",
        action="store_true",
        help="Development mode: smallest model, batching and caching on",
    )
    gen.add_argument(
        "--no-cache",
        action="store_true",
        help="Disable the value cache",
    )
    gen.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (inferred from --output, else json)",
    )
    gen.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output file (prints to stdout if omitted)",
    )

    est = subparsers.add_parser("estimate", help="Estimate cost and time for a run")
    est.add_argument("schema", type=Path, help="Schema file (YAML or JSON)")
    est.add_argument("-n", "--count", type=int, default=1000, help="Number of records")
    est.add_argument("--provider", type=str, default=None, help="Single backend (default: compare all)")
    est.add_argument("--model", type=str, default=None, help="Model to price")

    init = subparsers.add_parser("init", help="Write an example schema file")
    init.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path("gannicus.schema.yaml"),
        help="Destination (default: gannicus.schema.yaml)",
    )
    init.add_argument("--force", action="store_true", help="Overwrite an existing file")

    return parser


def fast_provider_config(args: argparse.Namespace) -> ProviderConfig:
    """Backend for --fast: the development model unless a model is given."""
    model = args.model
    if model is None and args.provider == "ollama":
        model = get_model_for_use_case("development")
    return ProviderConfig(name=args.provider, model=model, base_url=args.base_url)


def run_generate(args: argparse.Namespace) -> int:
    schema = load_schema(args.schema)

    pbar = tqdm(total=args.count, desc="Generating records", unit="rec", disable=args.output is None)

    def on_progress(current: int, total: int) -> None:
        pbar.update(current - pbar.n)

    common = dict(
        seed=args.seed,
        on_progress=on_progress,
        use_cache=not args.no_cache,
        advanced=AdvancedOptions(max_retries=args.max_retries, timeout=args.timeout),
    )

    try:
        if args.fast:
            result = asyncio.run(generate_fast(
                schema,
                args.count,
                provider=fast_provider_config(args),
                batch_size=args.batch_size,
                **common
            ))
        else:
            options = GenerateOptions(
                count=args.count,
                provider=ProviderConfig(name=args.provider, model=args.model, base_url=args.base_url),
                batch_size=args.batch_size,
                **common
            )
            result = asyncio.run(generate(schema, options))
    finally:
        pbar.close()

    if args.output is not None:
        export_records(result.data, args.output, args.format)
    else:
        print(format_records(result.data, args.format or "json"))

    stats = result.stats
    print(
        f"Generated {stats.total_records}/{stats.requested_records} records | "
        f"{stats.llm_calls} LLM values ({stats.cache_hits} cached) | "
        f"{stats.provider} ({stats.model}) | {stats.duration_ms / 1000:.1f}s",
        file=sys.stderr,
    )

    if result.errors:
        print(f"\n{len(result.errors)} recovered errors:", file=sys.stderr)
        for error in result.errors[:10]:
            location = f"record {error.record_index}"
            if error.field_name:
                location += f", field {error.field_name}"
            print(f"  {location}: {error.message}", file=sys.stderr)

    return 0


def run_estimate(args: argparse.Namespace) -> int:
    schema = load_schema(args.schema)
    llm_fields = sum(1 for fld in schema.values() if isinstance(fld, LLMField))

    if args.provider:
        estimates = [estimate_cost(args.provider, args.model, args.count, llm_fields)]
    else:
        estimates = compare_providers(args.count, llm_fields)

    print(f"{llm_fields} LLM field(s) per record")
    for estimate in estimates:
        print(f"  {estimate.provider:<10} {format_cost_estimate(estimate)}")
    return 0


def run_init(args: argparse.Namespace) -> int:
    if args.path.exists() and not args.force:
        print(f"{args.path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1
    args.path.write_text(EXAMPLE_SCHEMA, encoding="utf-8")
    print(f"Created {args.path}")
    return 0


COMMANDS = {
    "generate": run_generate,
    "gen": run_generate,
    "estimate": run_estimate,
    "init": run_init,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except (GannicusError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
