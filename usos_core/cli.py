#!/usr/bin/env python3
"""Command-line tools for USOS API credentials."""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from collections.abc import Callable
from pathlib import Path

from dotenv import load_dotenv

from usos_core.auth import AccessToken, TokenAcquisitionFlow
from usos_core.client import UsosClient, UsosUri
from usos_core.errors import ConfigurationError, UsosClientError
from usos_core.keys import ConsumerKey
from usos_core.scopes import Scopes

# Exit codes for better error reporting
EXIT_SUCCESS = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_API_ERROR = 2
EXIT_UNEXPECTED_ERROR = 3


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Manage USOS API consumer keys and access tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s token --scopes studies grades
  %(prog)s register "My app" dev@example.com --output ./keys
  %(prog)s revoke
        """,
    )
    parser.add_argument(
        "--base-url",
        "-b",
        default=UsosUri.origin(),
        help="Origin of the USOS installation (default: %(default)s)",
        dest="base_url",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    token_parser = subparsers.add_parser("token", help="Obtain an access token using a PIN")
    token_parser.add_argument(
        "--scopes",
        "-s",
        nargs="*",
        default=[],
        help="Scopes to request",
    )
    token_parser.add_argument(
        "--callback",
        "-c",
        help="Callback URL (default: out-of-band PIN)",
    )

    register_parser = subparsers.add_parser("register", help="Register a new consumer key")
    register_parser.add_argument("app_name", help="Name of the application")
    register_parser.add_argument("email", help="Developer email")
    register_parser.add_argument("--website-url", "-w", dest="website_url", help="Website of the application")
    register_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("."),
        help="Directory for the exported .env file (default: %(default)s)",
        dest="output_dir",
    )

    subparsers.add_parser("revoke", help="Revoke the consumer key from the environment")

    return parser.parse_args(args)


def prompt_for_pin(
    authorization_url: str,
    input_func: Callable[[str], str] = input,
    output_func: Callable[[str], None] = print,
) -> str:
    """Ask the user to authorize the application and enter the PIN, until it looks valid."""
    output_func(f"Please visit the following URL to authorize the application: {authorization_url}")
    while True:
        pin = input_func("Enter the verifier PIN: ").strip()
        if pin.isdigit():
            return pin
        output_func("The PIN should consist of digits only, try again.")


def run_token_flow(client: UsosClient, consumer: ConsumerKey, scopes: list[str], callback: str | None) -> AccessToken:
    flow = TokenAcquisitionFlow(client, consumer)
    url = flow.start(callback, Scopes(scopes))
    return flow.complete(prompt_for_pin(url))


def main(args: list[str] | None = None) -> int:
    """Run a credentials command."""
    parsed_args = parse_command_line_args(args)
    if parsed_args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    load_dotenv()

    try:
        with UsosClient(parsed_args.base_url) as client:
            if parsed_args.command == "token":
                consumer = ConsumerKey.from_env()
                access_token = run_token_flow(client, consumer, parsed_args.scopes, parsed_args.callback)
                print(f"Access token: {access_token.token}")
                print(f"Access token secret: {access_token.secret.expose_secret()}")
            elif parsed_args.command == "register":
                consumer = ConsumerKey.generate(
                    client,
                    parsed_args.app_name,
                    parsed_args.email,
                    parsed_args.website_url,
                )
                path = consumer.save_to_file(parsed_args.output_dir)
                print(f"Consumer key {consumer.key} saved to {path}")
            elif parsed_args.command == "revoke":
                consumer = ConsumerKey.from_env()
                consumer.revoke(client)
                print(f"Revocation of {consumer.key} requested, check your email to complete it.")

        return EXIT_SUCCESS

    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except UsosClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_API_ERROR
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_UNEXPECTED_ERROR


if __name__ == "__main__":
    sys.exit(main())
