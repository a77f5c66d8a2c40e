import asyncio
import argparse
import json
import logging
import sys
from core.engine import Engine
from core.errors import InvalidInputError
from core.report import serialize_report
from fetch.dns_client import DEFAULT_DNS_TIMEOUT, DEFAULT_DOH_ENDPOINT
from fetch.http_client import AUXILIARY_TIMEOUT, DEFAULT_TIMEOUT

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Website security, SEO and technology report")
    parser.add_argument("url", help="Target URL (e.g., example.com or https://example.com)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help=f"Main page timeout in seconds (default: {DEFAULT_TIMEOUT:g})")
    parser.add_argument("--aux-timeout", type=float, default=AUXILIARY_TIMEOUT, help=f"robots.txt / sitemap.xml timeout in seconds (default: {AUXILIARY_TIMEOUT:g})")
    parser.add_argument("--dns-timeout", type=float, default=DEFAULT_DNS_TIMEOUT, help=f"Per-record DNS lookup timeout in seconds (default: {DEFAULT_DNS_TIMEOUT:g})")
    parser.add_argument("--doh-endpoint", type=str, default=DEFAULT_DOH_ENDPOINT, help=f"DNS-over-HTTPS JSON endpoint (default: {DEFAULT_DOH_ENDPOINT})")
    parser.add_argument("--no-tls", action="store_true", help="Skip the TLS handshake that reads certificate issuer and expiry")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2, use 0 for compact output)")
    parser.add_argument("--log-level", type=str, default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity level (default: WARNING)")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    # Configure logging; stdout is reserved for the JSON report
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, args.log_level),
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    engine = Engine(
        timeout=args.timeout,
        auxiliary_timeout=args.aux_timeout,
        dns_timeout=args.dns_timeout,
        doh_endpoint=args.doh_endpoint,
        inspect_tls=not args.no_tls,
    )
    indent = args.indent or None

    try:
        report = asyncio.run(engine.analyze(args.url))
    except InvalidInputError as e:
        logger.error(f"Invalid input: {e}")
        print(json.dumps({"error": str(e)}, indent=indent))
        return 2

    print(json.dumps(serialize_report(report), indent=indent))
    return 0

if __name__ == "__main__":
    sys.exit(main())
