#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

import uvicorn
from dotenv import load_dotenv

from pd_cert_assistant import __version__
from pd_cert_assistant.app import build_app, build_kubernetes_service
from pd_cert_assistant.common.logging import configure_logging
from pd_cert_assistant.config import ConfigurationError, get_app_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_listen(value: str) -> tuple[str, int]:
    host, sep, port = value.rpartition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected address:port, got {value!r}")
    try:
        port_number = int(port)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid port in {value!r}") from exc
    return host or "0.0.0.0", port_number  # noqa: S104


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep a cert-manager Certificate's IP SANs in sync with PD cluster nodes"
    )
    parser.add_argument(
        "--listen",
        type=_parse_listen,
        default=":8765",
        help="Address:port to listen on (default: %(default)s)",
    )
    parser.add_argument(
        "--kubeconfig",
        type=str,
        help="Path to a kubeconfig file; in-cluster configuration is used when omitted",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if args.version:
        print(f"Version: {__version__}")
        sys.exit(0)

    configure_logging(level=args.log_level)
    try:
        config = get_app_config()
        service = build_kubernetes_service(
            config, kubeconfig=args.kubeconfig, version=__version__
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    log.info("Starting application. Version: %s", __version__)
    if config.peers.static_urls:
        log.info("Static pd-assistant URLs: %s", ", ".join(config.peers.static_urls))
    else:
        log.info("PD discovery mode: %s", config.discovery.mode)
    log.info(
        "Certificate: %s/%s, consensus check: %s",
        config.certificate.namespace,
        config.certificate.name,
        config.peers.consensus,
    )

    host, port = args.listen
    uvicorn.run(
        build_app(service, version=__version__),
        host=host,
        port=port,
        log_level=args.log_level.lower(),
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
