"""
Shuttle route optimization.

Usage:
    python -m shuttle_routing optimize FILE [options]
    python -m shuttle_routing serve [--host HOST] [--port PORT]

FILE is a JSON request (same body as ``POST /api/optimize``) or a CSV of bookings.
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from .config import SolverCredentials, get_default_config, setup_logging
from .errors import ShuttleRoutingError
from .loaders import load_request, save_json
from .optimization import optimize_request
from .reporting import print_summary
from .solver import GoogleRouteOptimizationSolver


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="shuttle_routing",
        description="Passenger shuttle route optimization"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    optimize = commands.add_parser("optimize", help="Optimize a request file")
    optimize.add_argument("file", help="JSON request or bookings CSV")
    optimize.add_argument(
        "--output",
        type=str,
        default=None,
        help="Filename to save the full JSON response"
    )
    optimize.add_argument(
        "--include-pickups",
        action="store_true",
        help="Detail pickup visits instead of drop-offs"
    )
    optimize.add_argument("--vehicles", type=int, default=1, help="Fleet size for CSV input")
    optimize.add_argument("--start-location", type=str, default="AMB Terminal 2", help="Fleet start for CSV input")
    optimize.add_argument("--capacity", type=int, default=None, help="Vehicle capacity for CSV input")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8005)

    return parser.parse_args(argv)


def run_optimize(args: argparse.Namespace, logger: logging.Logger) -> int:
    config = get_default_config()
    request = load_request(
        args.file,
        vehicle_count=args.vehicles,
        start_location=args.start_location,
        vehicle_capacity=args.capacity,
    )
    solver = GoogleRouteOptimizationSolver(SolverCredentials.from_env(), config)

    logger.info("Starting optimization...")
    response = asyncio.run(
        optimize_request(request, solver, config, include_pickups=args.include_pickups)
    )
    print_summary(response["summary"])

    if args.output:
        save_json(response, args.output)
        logger.info(f"Results saved to {args.output}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logging(level=log_level)

    if args.command == "serve":
        uvicorn.run("shuttle_routing.main:app", host=args.host, port=args.port)
        return 0

    try:
        return run_optimize(args, logger)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ShuttleRoutingError as e:
        logger.error(f"Optimization error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Data error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
