"""Command line interface for the Chaum-Pedersen authentication service."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from cpauth.auth import AuthService, authenticate
from cpauth.config import Settings
from cpauth.constants import GROUPS, get_group
from cpauth.crypto import Prover, generate_secret
from cpauth.encoding import int_to_hex

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(filename)s:%(lineno)d] %(message)s"

logger = logging.getLogger("cp_auth")


def parse_args(argv: list[str], settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_group_option(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--group",
            default=settings.group,
            choices=sorted(GROUPS),
            help=f"Named group parameters (default: {settings.group})",
        )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP authentication server")
    add_group_option(serve_parser)
    serve_parser.add_argument("--host", default=settings.host, help="Listen address")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Listen port")
    serve_parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict,
        help="Reject group elements outside of [0, p)",
    )

    keygen_parser = subparsers.add_parser("keygen", help="Derive a public commitment")
    add_group_option(keygen_parser)
    keygen_parser.add_argument(
        "--secret",
        help="Hex-encoded secret. If omitted a random value is generated and printed.",
    )

    demo_parser = subparsers.add_parser(
        "demo",
        help="Register and authenticate a user against an in-process service",
    )
    add_group_option(demo_parser)
    demo_parser.add_argument("--user", default="alice", help="User identity (default: alice)")
    demo_parser.add_argument("--secret", help="Hex-encoded secret used at registration")
    demo_parser.add_argument(
        "--wrong-secret",
        help="Hex-encoded secret used to answer the challenge instead of --secret",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    namespace = parse_args(sys.argv[1:] if argv is None else argv, settings)
    logging.basicConfig(level=namespace.log_level.upper(), format=LOG_FORMAT)

    if namespace.command == "serve":
        import uvicorn

        from cpauth.server import create_app

        service = AuthService(get_group(namespace.group), strict=namespace.strict)
        logger.info("Serving group %s on %s:%d", namespace.group, namespace.host, namespace.port)
        uvicorn.run(create_app(service), host=namespace.host, port=namespace.port)
        return 0

    params = get_group(namespace.group)

    if namespace.command == "keygen":
        secret = int(namespace.secret, 16) if namespace.secret else generate_secret(params)
        prover = Prover(params, secret)
        y1, y2 = prover.public_commitment()
        payload = {
            "group": params.name,
            "secret": int_to_hex(secret),
            "y1": int_to_hex(y1),
            "y2": int_to_hex(y2),
        }
        print(json.dumps(payload, indent=2))
        return 0

    if namespace.command == "demo":
        secret = int(namespace.secret, 16) if namespace.secret else generate_secret(params)
        service = AuthService(params)
        service.register(namespace.user, *Prover(params, secret).public_commitment())

        answering = int(namespace.wrong_secret, 16) if namespace.wrong_secret else secret
        transcript = authenticate(service, namespace.user, Prover(params, answering))
        print(json.dumps(transcript, indent=2))
        return 0 if transcript["success"] else 1

    raise RuntimeError("Unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
