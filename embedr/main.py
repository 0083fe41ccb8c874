import sys
import json
import argparse
import logging
from typing import List, Optional

from colorama import Fore, Style, init as colorama_init

from embedr.bootstrap import create_container
from embedr.client import OEmbed
from embedr.core.config import VERSION
from embedr.core.errors import EmbedError, UsageError

RESERVED_PARAMS = ("url", "providers", "format", "transport")


def _parse_param(raw: str):
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    key, value = raw.split("=", 1)
    if not key:
        raise argparse.ArgumentTypeError(f"empty key in {raw!r}")
    if key in RESERVED_PARAMS:
        raise argparse.ArgumentTypeError(f"{key!r} cannot be passed as an extra parameter")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="embedr", description="Fetch OEmbed data for a media URL")
    parser.add_argument("--version", action="version", version=f"embedr {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    get_parser = subparsers.add_parser("get", help="Fetch and print embed data as JSON")
    url_parser = subparsers.add_parser("url", help="Print the request URL without fetching")
    for p in (get_parser, url_parser):
        p.add_argument("url", help="Media URL to embed")
        p.add_argument("-f", "--format", help="Response format (json or xml)", default=None)
        p.add_argument("-p", "--param", action="append", type=_parse_param, default=[],
                       metavar="KEY=VALUE", help="Extra query parameter, e.g. maxwidth=600")
    get_parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")

    subparsers.add_parser("providers", help="List supported providers")
    subparsers.add_parser("formats", help="List response formats and whether they are usable")
    return parser


def _error(message: str):
    print(f"{Fore.RED}Error:{Style.RESET_ALL} {message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    colorama_init()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    try:
        container = create_container()
    except UsageError as e:
        _error(str(e))
        return 1

    settings = container["settings"]
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command in ("get", "url"):
            transport = container["transport"]
            if args.command == "get" and args.timeout is not None:
                transport.timeout = args.timeout

            client = OEmbed(
                args.url,
                format=args.format or settings.format,
                transport=transport,
                **dict(args.param),
            )

            if args.command == "url":
                print(client.request_url)
                return 0

            with transport:
                data = client.fetch()
            if data is None:
                print(f"{Fore.YELLOW}Embedding disabled by {client.domain}{Style.RESET_ALL}")
            else:
                print(json.dumps(data, indent=2, ensure_ascii=False))

        elif args.command == "providers":
            print(f"{'Domain':<16} {'Style':<8} {'Endpoint'}")
            print("_" * 60)
            for domain, provider in container["registry"].items():
                style = "dot" if provider.dot_format else "query"
                print(f"{domain:<16} {style:<8} {provider.endpoint}")

        elif args.command == "formats":
            for format_id, fmt in container["formats"].items():
                if fmt.is_available():
                    status = f"{Fore.GREEN}available{Style.RESET_ALL}"
                else:
                    status = f"{Fore.RED}missing ({fmt.requires}){Style.RESET_ALL}"
                print(f"{format_id:<6} {status}")

    except EmbedError as e:
        _error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
