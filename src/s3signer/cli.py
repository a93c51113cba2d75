"""CLI entry point for s3signer."""

import argparse
import logging
import sys
from pathlib import Path

from s3signer.config import SignerConfig, load_config
from s3signer.errors import SignerError
from s3signer.logging_config import configure_logging
from s3signer.models import HTTPMethod
from s3signer.payload import EMPTY, UNSIGNED, Payload
from s3signer.signer import Signer

logger = logging.getLogger("s3signer")


def _header(value: str) -> tuple[str, str]:
    """argparse type for ``-H 'Name: value'``."""
    name, sep, rest = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {value!r}")
    return name.strip(), rest.strip()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="s3signer",
        description="s3signer - AWS Signature Version 4 signing for S3 requests",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("s3signer.yaml"),
        help="Path to YAML configuration file (default: s3signer.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config, default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Log format: 'text' (human-readable) or 'json' (structured)",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--url", required=True, help="Full request URL including scheme")
    common.add_argument(
        "--method",
        type=str.upper,
        default="GET",
        choices=[m.value for m in HTTPMethod],
        help="HTTP method (default: GET)",
    )
    common.add_argument(
        "-H",
        "--header",
        dest="headers",
        type=_header,
        action="append",
        default=[],
        help="Extra header to sign, as 'Name: value' (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    header_cmd = subparsers.add_parser(
        "header", parents=[common], help="Print the headers of a signed request"
    )
    body = header_cmd.add_mutually_exclusive_group()
    body.add_argument("--data", type=str, default=None, help="Request body text")
    body.add_argument("--data-file", type=Path, default=None, help="Read the request body from a file")
    body.add_argument(
        "--unsigned",
        action="store_true",
        help="Leave the body out of the signature (UNSIGNED-PAYLOAD)",
    )

    presign_cmd = subparsers.add_parser(
        "presign", parents=[common], help="Print a presigned URL"
    )
    presign_cmd.add_argument(
        "--expires",
        type=int,
        default=None,
        help="Seconds the URL stays valid (overrides config, default: 3600)",
    )
    return parser.parse_args(argv)


def _payload(args: argparse.Namespace) -> Payload:
    if args.unsigned:
        return UNSIGNED
    if args.data_file is not None:
        return Payload.data(args.data_file.read_bytes())
    if args.data is not None:
        return Payload.data(args.data)
    return EMPTY


def run(args: argparse.Namespace, config: SignerConfig) -> str:
    """Execute a parsed command and return what it prints.

    Raises:
        SignerError: If signing fails.
    """
    signer = Signer.from_config(config)
    headers = dict(args.headers)

    if args.command == "presign":
        expires = args.expires if args.expires is not None else config.signing.default_expires
        return signer.presigned_url_v4(args.method, args.url, expires, headers)

    signed = signer.auth_header_v4(args.method, args.url, headers, _payload(args))
    return "\n".join(f"{name}: {value}" for name, value in signed.items())


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the s3signer CLI.

    Loads configuration, applies CLI overrides, signs the request and
    prints the result to stdout.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].
    """
    args = parse_args(argv)

    # Use a basic stderr logger for config-loading errors
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        logger.error("Config file not found: %s", args.config)
        sys.exit(1)
    except Exception as exc:
        logger.error("Failed to load config: %s", exc)
        sys.exit(1)

    if args.log_level is not None:
        config.logging.level = args.log_level
    if args.log_format is not None:
        config.logging.format = args.log_format

    configure_logging(level=config.logging.level, fmt=config.logging.format)

    try:
        output = run(args, config)
    except SignerError as exc:
        logger.error("Signing failed (%s): %s", exc.code, exc.message)
        sys.exit(1)
    except OSError as exc:
        logger.error("Could not read request body: %s", exc)
        sys.exit(1)

    print(output)


if __name__ == "__main__":
    main()
