"""Maintenance CLI for the session & refresh-token store.

Usage (from project root):
  python cli.py migrate [--revision head]
  python cli.py purge-tokens --retention-days 30
  python cli.py revoke-session <session_id>
  python cli.py revoke-user-sessions <user_id>
  python cli.py token-chain <session_id>
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from config import ApplicationConfig
from libs.result import Result

logger = logging.getLogger("auth_store.cli")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _report(result: Result) -> int:
    if result.is_err():
        error = result.error
        print(f"{error.code}: {error.message}", file=sys.stderr)
        return 1
    print(result.value.model_dump_json(indent=2))
    return 0


def _migrate(revision: str) -> int:
    from src.adapter.schema import upgrade_schema

    upgrade_schema(revision=revision)
    logger.info("Schema migrated to %s", revision)
    return 0


async def _purge_tokens(retention_days: Optional[int]) -> int:
    from src.app.use_cases.maintenance import PurgeExpiredTokensUseCase
    from src.depends import engine, get_unit_of_work

    retention = timedelta(days=retention_days) if retention_days is not None else None
    async with get_unit_of_work() as uow:
        result = await PurgeExpiredTokensUseCase(uow).execute(retention)
    await engine.dispose()
    return _report(result)


async def _revoke_session(session_id: UUID) -> int:
    from src.app.use_cases.sessions import RevokeSessionsUseCase
    from src.depends import engine, get_unit_of_work

    async with get_unit_of_work() as uow:
        result = await RevokeSessionsUseCase(uow).revoke_session(session_id)
    await engine.dispose()
    return _report(result)


async def _revoke_user_sessions(user_id: UUID) -> int:
    from src.app.use_cases.sessions import RevokeSessionsUseCase
    from src.depends import engine, get_unit_of_work

    async with get_unit_of_work() as uow:
        result = await RevokeSessionsUseCase(uow).revoke_all_for_user(user_id)
    await engine.dispose()
    return _report(result)


async def _token_chain(session_id: UUID) -> int:
    from src.app.use_cases.tokens import GetTokenChainUseCase
    from src.depends import engine, get_unit_of_work

    async with get_unit_of_work() as uow:
        result = await GetTokenChainUseCase(uow).execute(session_id)
    await engine.dispose()
    return _report(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--log-level",
        default=ApplicationConfig.LOG_LEVEL,
        help="Logging level (default: LOG_LEVEL from env.yaml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    migrate = sub.add_parser("migrate", help="Apply Alembic migrations (MIGRATION_DB_URI)")
    migrate.add_argument("--revision", default="head", help="Target revision (default: head)")

    purge = sub.add_parser("purge-tokens", help="Delete long-expired refresh tokens")
    purge.add_argument(
        "--retention-days",
        type=int,
        default=None,
        help="Keep expired rows this many days (default: TOKEN_RETENTION_DAYS)",
    )

    revoke = sub.add_parser("revoke-session", help="Revoke one session")
    revoke.add_argument("session_id", type=UUID)

    revoke_user = sub.add_parser(
        "revoke-user-sessions", help="Revoke every active session of a user"
    )
    revoke_user.add_argument("user_id", type=UUID)

    chain = sub.add_parser("token-chain", help="Show a session's rotation chain")
    chain.add_argument("session_id", type=UUID)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "migrate":
        return _migrate(args.revision)
    if args.command == "purge-tokens":
        return asyncio.run(_purge_tokens(args.retention_days))
    if args.command == "revoke-session":
        return asyncio.run(_revoke_session(args.session_id))
    if args.command == "revoke-user-sessions":
        return asyncio.run(_revoke_user_sessions(args.user_id))
    if args.command == "token-chain":
        return asyncio.run(_token_chain(args.session_id))
    return 2


if __name__ == "__main__":
    sys.exit(main())
