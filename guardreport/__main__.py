"""Guard Report CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path.cwd() / ".env"
load_dotenv(env_file)

from guardreport import __version__
from guardreport.config import get_settings
from guardreport.notifications import NotificationGateway
from guardreport.storage import get_db_info

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _mask(value: str) -> str:
    return "✓ Set" if value else "✗ Not set"


def _print_config_errors(e: ValidationError) -> None:
    print("\n❌ Configuration Error:\n")
    for error in e.errors():
        print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
    print()


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the HTTP API."""
    import uvicorn

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    log_level = "DEBUG" if args.debug else settings.log_level
    logging.getLogger().setLevel(log_level)

    print(f"\n=== Guard Report API {__version__} ===\n")
    print(f"Listening on {settings.host}:{settings.port}\n")

    uvicorn.run(
        "guardreport.api.server:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=args.reload,
        log_level=log_level.lower(),
    )
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Display effective configuration with secrets masked."""
    try:
        settings = get_settings()
    except ValidationError as e:
        _print_config_errors(e)
        return 1

    db_info = get_db_info(settings)

    print("\n=== Guard Report Configuration ===\n")
    print(f"Environment: {settings.environment}")
    print(f"Debug: {settings.debug}")
    print(f"Listen: {settings.host}:{settings.port}")
    print(f"CORS Origins: {', '.join(settings.cors_origins)}\n")

    print("Database:")
    print(f"  URL: {db_info['url']}")
    print(f"  Database: {db_info['database']}\n")

    print("Mail:")
    print(f"  Server: {settings.email_host}:{settings.email_port} (TLS: {settings.email_use_tls})")
    print(f"  User: {settings.email_user or '(none)'}")
    print(f"  Password: {_mask(settings.email_password)}")
    print(f"  Administrator: {settings.admin_email or '(none)'}\n")

    print(f"Logfire: {_mask(settings.logfire_token)}\n")
    return 0


def cmd_check_mail(args: argparse.Namespace) -> int:
    """Verify the SMTP connection and credentials once."""
    try:
        settings = get_settings()
    except ValidationError as e:
        _print_config_errors(e)
        return 1

    notifier = NotificationGateway(settings)

    if asyncio.run(notifier.verify()):
        print(f"\n✓ Mail connection verified ({settings.email_host}:{settings.email_port})\n")
        return 0

    print(f"\n❌ Mail connection failed ({settings.email_host}:{settings.email_port})\n")
    return 1


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Guard Report: incident reporting backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Guard Report {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_serve = subparsers.add_parser(
        "serve",
        help="Start the HTTP API",
    )
    parser_serve.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_serve.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )
    parser_serve.set_defaults(func=cmd_serve)

    parser_config = subparsers.add_parser(
        "config",
        help="Display effective configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_check_mail = subparsers.add_parser(
        "check-mail",
        help="Verify the SMTP connection and credentials",
    )
    parser_check_mail.set_defaults(func=cmd_check_mail)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
