"""Read Cloudportal tickets from the command line.

This module serves as a CLI wrapper around cloudportal.provider.
"""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path

import yaml

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cloudportal.config import load_provider_file, load_settings
from cloudportal.core.flattener import TicketFlattener
from cloudportal.core.portal import CloudportalError
from cloudportal.provider import Provider, TicketDataSource, TICKET_DATA_SOURCE


def _dump(payload, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=False)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Cloudportal ticket reader")
    sub = parser.add_subparsers(dest="cmd")

    rd = sub.add_parser("read", help="Read a ticket and print its flattened state")
    rd.add_argument("--id", required=True, dest="ticket_id")
    rd.add_argument("--config", help="Provider block as YAML/JSON (defaults to environment)")
    rd.add_argument("--format", choices=["json", "yaml"], default="json")
    rd.add_argument("--absent-as-empty", action="store_true",
                    help="Render absent optional strings as \"\" instead of null")

    sc = sub.add_parser("schema", help="Print the ticket data source schema")
    sc.add_argument("--format", choices=["json", "yaml"], default="json")

    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0

    if args.cmd == "schema":
        print(_dump(TicketDataSource.schema().to_dict(), args.format))
        return 0

    provider = Provider(flattener=TicketFlattener(absent_as_empty=args.absent_as_empty))
    try:
        config = load_provider_file(args.config) if args.config else load_settings()
        provider.configure(config)
        data = provider.read_data_source(TICKET_DATA_SOURCE, {"id": args.ticket_id})
    except (CloudportalError, OSError) as exc:
        print(f"[error] {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    finally:
        provider.close()

    print(_dump(data.state, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
