"""Admin Bootstrap CLI — `python -m app.cli create-admin --email ... --password ...`.

Invariants:
    - Registration only ever creates signers; this is the only way to get an admin
    - An existing account with the same email is promoted and its password replaced

Design Decisions:
    - Uses db/session.create_session_factory: no FastAPI app or request scope needed
"""

import argparse
import asyncio
import logging

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from pydantic import EmailStr

from app.config import get_settings
from app.db.session import create_session_factory
from app.infrastructure.observability import setup_logging
from app.schemas.auth import check_password_policy
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)


async def create_admin(
    email: str, password: str, first_name: str | None, last_name: str | None,
) -> None:
    session_factory = create_session_factory(get_settings().database_url)
    async with session_factory() as db:
        await AuthService(db).create_admin(email, password, first_name, last_name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.cli")
    commands = parser.add_subparsers(dest="command", required=True)

    admin = commands.add_parser("create-admin", help="create or promote an admin")
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--first-name")
    admin.add_argument("--last-name")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, "text")

    try:
        email = TypeAdapter(EmailStr).validate_python(args.email)
        check_password_policy(args.password)
    except (PydanticValidationError, ValueError) as e:
        logger.error(f"Invalid admin credentials: {e}")
        return 2

    asyncio.run(create_admin(email, args.password, args.first_name, args.last_name))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
