#!/usr/bin/env python3
"""Solve a constant heading trajectory from YAML configuration."""

import argparse
import json
import logging
import math
from pathlib import Path

import yaml

from constant_heading.config import load_config
from constant_heading.exceptions import IntegrationError
from constant_heading.solver import ConstantHeadingSolver

logger = logging.getLogger(__name__)

LINE_COLOR = "#2563eb"


def main(argv: list[str] | None = None) -> int:
    """Run the solver and print the result."""
    parser = argparse.ArgumentParser(description="Solve a constant heading trajectory")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/blue_observation_zone.yaml",
        help="Path to the problem configuration file",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the result as JSON to this path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(asctime)s][%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: Configuration file '{args.config}' not found.")
        return 1

    logger.info(f"Loading configuration from {config_path}")
    try:
        config, settings = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: Invalid configuration: {e}")
        return 1

    try:
        result = ConstantHeadingSolver(config, settings).solve()
    except IntegrationError as e:
        print(f"Error: {e}")
        return 1

    curve = result.curve
    print("=" * 60)
    print(f"theta       : {result.theta:.4f} rad ({math.degrees(result.theta):.1f} deg)")
    for name, point in zip(("P0", "P1", "P2", "P3"), curve.control_points, strict=True):
        print(f"{name:<12}: ({point.x:.3f}, {point.y:.3f})")
    print(f"arc length  : {curve.arc_length:.3f} in")
    print(f"T1          : {result.t1:.3f} s")
    print(f"T2          : {result.t2:.3f} s")
    print(f"total time  : {result.total_time:.3f} s")
    print(f"penalty     : {result.penalty:.4f}")
    print(f"clearance   : {result.min_clearance:.3f} in")
    if not result.accurate:
        print(f"warning     : {result.inversion_fallbacks} inversion fallbacks")
    print("=" * 60)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        payload = result.to_dict()
        payload["line"] = curve.export_as_line(math.degrees(result.theta), LINE_COLOR)
        with open(output_path, "w") as f:
            json.dump(payload, f, indent=2)
        logger.info(f"Result written to {output_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
