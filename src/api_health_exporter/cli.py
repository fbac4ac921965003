"""Command-line interface for the API health exporter."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from api_health_exporter import __version__, config
from api_health_exporter.errors import InventoryUnavailable
from api_health_exporter.inventory.kubectl import list_endpoints
from api_health_exporter.main import run


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the exporter CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = argparse.ArgumentParser(
        prog="api-health-exporter",
        description="Probe cluster API endpoints and export their health to Prometheus"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the exporter (reconciler + /metrics)"
    )
    serve_parser.add_argument(
        "--host",
        default=config.METRICS_HOST,
        help=f"Host to bind to (default: {config.METRICS_HOST})"
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=config.METRICS_PORT,
        help=f"Port to bind to (default: {config.METRICS_PORT})"
    )

    inventory_parser = subparsers.add_parser(
        "inventory",
        help="List the endpoints the exporter would monitor"
    )
    inventory_parser.add_argument(
        "--namespace",
        default=config.NAMESPACE,
        help=f"Namespace to list services from (default: {config.NAMESPACE})"
    )

    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        run(host=args.host, port=args.port)
        return 0

    elif args.command == "inventory":
        try:
            endpoints = list_endpoints(namespace=args.namespace)
        except InventoryUnavailable as e:
            print(f"Inventory unavailable: {e}", file=sys.stderr)
            return 1
        for name, address in sorted(endpoints.items()):
            print(f"{name}\t{address}")
        return 0

    elif args.command == "version":
        print(f"API Health Exporter version {__version__}")
        return 0

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
