from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional

from .config.config_parser import load_config_file, merge_config
from .config.logging_config import init_logging
from .errors import ConfigError, WalkError
from .query import QueryExecutor
from .report import print_header, print_nameservers
from .resolv_conf import load_resolv_conf
from .walker import ZoneWalker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nschain",
        description=(
            "Walk the DNS delegation chain from the root zone down to ZONE, "
            "printing the nameservers found at every level."
        ),
    )
    parser.add_argument("zone", metavar="ZONE", help="Domain name to walk to")
    parser.add_argument("--config", default=None, help="Path to optional YAML config")
    parser.add_argument(
        "--resolv-conf",
        default=None,
        help="Resolver configuration used for root discovery (default /etc/resolv.conf)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Per-query timeout in seconds (default 5)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible nameserver selection"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warn", "warning", "error", "crit", "critical"],
        help="Diagnostic log level on stderr (default warn)",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    """
    Entry point for the nschain CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        0 when every zone level was walked, 1 on any failure.

    Example use:
        nschain www.example.com
        python -m nschain --seed 1 example.org.
    """
    args = build_parser().parse_args(argv)

    try:
        cfg = merge_config(
            load_config_file(args.config),
            resolv_conf=args.resolv_conf,
            timeout=args.timeout,
            seed=args.seed,
            log_level=args.log_level,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        init_logging(cfg.get("logging"))
    except OSError as exc:
        print(f"Cannot initialize logging: {exc}", file=sys.stderr)
        return 1
    logger = logging.getLogger("nschain.main")
    if args.config:
        logger.info("Loaded config from %s", args.config)

    try:
        resolver_cfg = load_resolv_conf(cfg["resolv_conf"])
    except ConfigError as exc:
        logger.critical("Cannot initialize the local resolver: %s", exc)
        return 1

    rng = random.Random(cfg["seed"]) if cfg["seed"] is not None else None
    walker = ZoneWalker(
        resolver_cfg,
        executor=QueryExecutor(timeout=cfg["timeout"], port=resolver_cfg.port),
        rng=rng,
    )

    try:
        for step in walker.walk(args.zone, on_level=print_header):
            print_nameservers(step)
    except WalkError as exc:
        logger.critical("Query failed: %s", exc)
        return 1
    except ValueError as exc:
        logger.critical("Invalid zone %r: %s", args.zone, exc)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())  # pragma: no cover
