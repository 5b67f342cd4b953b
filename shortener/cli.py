"""
Command line helpers for operating the URL shortener.

Usage:
    shortener-admin init-db
    shortener-admin create-user alice
"""

import argparse
import asyncio
import getpass
import sys

from loguru import logger
from pydantic import ValidationError

from shortener.core.config import settings
from shortener.core.logging import setup_logging
from shortener.db.base import engine, init_models
from shortener.db.session import SessionManager
from shortener.models.user import CredentialCreate
from shortener.repositories.base import DuplicateEntityError, RepositoryError
from shortener.repositories.user_repository import UserRepository


async def init_db() -> int:
    await init_models()
    logger.info("Tables created")
    return 0


async def create_user(username: str, password: str) -> int:
    """Store a credential that may delete mappings."""
    try:
        data = CredentialCreate(username=username, password=password)
    except ValidationError as e:
        for error in e.errors():
            logger.error(f"Invalid {'.'.join(map(str, error['loc']))}: {error['msg']}")
        return 1

    await init_models()
    try:
        async with SessionManager.transaction_context() as db:
            credential = await UserRepository().create_user(db, data)
    except DuplicateEntityError:
        logger.error(f"User {username!r} already exists")
        return 1
    except RepositoryError as e:
        logger.error(f"Failed to create user {username!r}: {e}")
        return 1

    logger.info(f"Created user {credential.username!r}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shortener-admin", description="URL shortener administration")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the mapping and user tables")

    user_parser = subparsers.add_parser("create-user", help="Add a user allowed to delete short codes")
    user_parser.add_argument("username")
    user_parser.add_argument(
        "--password",
        help="Password (prompted for when omitted)",
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    try:
        if args.command == "init-db":
            return await init_db()
        password = args.password or getpass.getpass("Password: ")
        if not password:
            logger.error("Password must not be empty")
            return 1
        return await create_user(args.username, password)
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    if not settings.DEBUG:
        logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
