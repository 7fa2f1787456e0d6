#!/usr/bin/env python3
"""
Issue an access token for a caller identity.

Uses the same JWT settings as the API (JWT_SECRET, JWT_ALGORITHM,
JWT_ACCESS_TOKEN_EXPIRES), so the token is accepted by a server started with
the same environment.

    python -m relief_api.scripts.issue_token coordinator --name "Ops Desk"
"""

import argparse
import os
import sys

from ..services.auth import AuthService, AuthenticationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue a relief registry access token")
    parser.add_argument("identity", help="Caller identity placed in the token subject")
    parser.add_argument("--name", help="Optional display name")
    parser.add_argument(
        "--expires",
        type=int,
        default=int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', '900')),
        help="Lifetime in seconds"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    secret = os.getenv('JWT_SECRET', 'dev-secret-key')
    auth_service = AuthService(secret, os.getenv('JWT_ALGORITHM', 'HS256'), args.expires)

    try:
        token = auth_service.issue_token(args.identity, name=args.name)
    except AuthenticationError as e:
        print(f"Could not issue token: {e}", file=sys.stderr)
        return 1

    print(token["access_token"])
    print(f"# expires at {token['expires_at']}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
