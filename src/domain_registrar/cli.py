"""
Command-line interface for the domain registrar system.

This module provides the main CLI entry point with commands for:
- register: Register a domain from a JSON request file
- show: Show the registry's current view of a domain
- zone: Locate or safely delete a domain's auto-created hosted zone
- delete: Delete a domain registration (requires --allow-delete)
- availability / price: Registry lookups
- config: Configuration management
"""

import argparse
import asyncio
import json
import math
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from . import __version__
from .audit_logger import AuditLogger
from .aws_client import Route53DomainsClient, Route53ZoneClient
from .config import (
    SystemConfig,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from .domain_validator import DomainValidator
from .enums import ContactType
from .exceptions import DomainRegistrarError, RegistrationError
from .manager import DomainManager
from .models import ContactDetail, RegistrationRequest
from .simulation import SimulatedRegistry

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2

DEFAULT_CONFIG_PATH = Path.home() / ".domain_registrar" / "config.json"


def contact_from_dict(data: dict) -> ContactDetail:
    """Build a ContactDetail from snake_case JSON keys."""
    return ContactDetail(
        first_name=data["first_name"],
        last_name=data["last_name"],
        email=data["email"],
        phone_number=data["phone_number"],
        address_line_1=data["address_line_1"],
        address_line_2=data.get("address_line_2"),
        city=data["city"],
        state=data["state"],
        zip_code=data["zip_code"],
        country_code=data["country_code"],
        contact_type=ContactType(data.get("contact_type", "PERSON")),
        organization_name=data.get("organization_name"),
    )


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _seconds(data: dict, key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number of seconds, got {value!r}")
    seconds = float(value)
    if not math.isfinite(seconds):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return seconds


def request_from_dict(data: dict) -> RegistrationRequest:
    """
    Build a RegistrationRequest from a JSON document.

    Timing values may be numbers or numeric strings; flags must be JSON booleans.

    Raises:
        KeyError, ValueError, TypeError: On missing or malformed fields
    """
    return RegistrationRequest(
        domain_name=data["domain_name"],
        duration_years=int(data.get("duration_years", 1)),
        auto_renew=_flag(data, "auto_renew", False),
        admin_contact=contact_from_dict(data["admin_contact"]),
        registrant_contact=contact_from_dict(data["registrant_contact"]),
        tech_contact=contact_from_dict(data["tech_contact"]),
        admin_privacy=_flag(data, "admin_privacy", True),
        registrant_privacy=_flag(data, "registrant_privacy", True),
        tech_privacy=_flag(data, "tech_privacy", True),
        nameservers=tuple(data.get("nameservers", ())),
        timeout_seconds=_seconds(data, "registration_timeout"),
        poll_interval_seconds=_seconds(data, "poll_interval"),
    )


def load_request_file(path: Path) -> RegistrationRequest:
    with open(path, "r", encoding="utf-8") as f:
        return request_from_dict(json.load(f))


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return _to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def emit(result: Any, as_json: bool) -> None:
    """Print a result dataclass as JSON or as key: value lines."""
    data = _to_jsonable(result)
    if as_json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return

    def walk(prefix: str, value: Any) -> None:
        if isinstance(value, dict):
            for key, item in value.items():
                walk(f"{prefix}{key}." if isinstance(item, dict) else f"{prefix}{key}", item)
        elif value is not None:
            print(f"{prefix.rstrip('.')}: {value}")

    walk("", data)


def load_config(args: argparse.Namespace) -> SystemConfig:
    config_path = Path(args.config) if args.config else None
    if config_path is not None:
        config = load_config_from_file(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config_from_file(DEFAULT_CONFIG_PATH)
    else:
        config = SystemConfig()

    config = load_config_from_env(config)
    if args.dry_run:
        config.simulation_mode = True
    if args.verbose:
        config.logging.level = "debug"
    return config


def create_manager(config: SystemConfig, logger: Optional[AuditLogger] = None) -> DomainManager:
    """
    Wire a DomainManager to AWS, or to the simulator in simulation mode.

    The simulator holds no state between invocations.
    """
    if config.simulation_mode:
        simulated = SimulatedRegistry(registrar_comment=config.zone_guard.registrar_comment)
        return DomainManager(simulated, simulated, config=config, logger=logger,
                             sleep=_no_sleep)

    return DomainManager(
        Route53DomainsClient.from_config(config.aws),
        Route53ZoneClient.from_config(config.aws),
        config=config,
        logger=logger,
    )


async def _no_sleep(_seconds: float) -> None:
    return None


async def cmd_register(args: argparse.Namespace, manager: DomainManager) -> int:
    try:
        request = load_request_file(Path(args.request))
    except (OSError, json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
        print(f"Invalid request file: {e}", file=sys.stderr)
        return EXIT_INVALID

    problems = DomainValidator().validate_request(request)
    if problems:
        for problem in problems:
            print(f"Invalid request: {problem}", file=sys.stderr)
        return EXIT_INVALID

    try:
        result = await manager.provision(request, delete_hosted_zone=args.delete_hosted_zone)
    except RegistrationError as e:
        emit({"error": e.to_dict(), "registered": e.registered}, args.json)
        return EXIT_FAILURE

    emit(result, args.json)
    return EXIT_OK


async def cmd_show(args: argparse.Namespace, manager: DomainManager) -> int:
    snapshot = await manager.read(args.domain)
    if snapshot is None:
        print(f"Domain not found: {args.domain}", file=sys.stderr)
        return EXIT_FAILURE
    emit(snapshot, args.json)
    return EXIT_OK


async def cmd_zone(args: argparse.Namespace, manager: DomainManager) -> int:
    if args.zone_command == "locate":
        zone = await manager.zone_guard.locate(args.domain)
        if zone is None:
            print(f"No hosted zone named {args.domain}", file=sys.stderr)
            return EXIT_FAILURE
        emit(zone, args.json)
        return EXIT_OK

    outcome = await manager.zone_guard.safe_delete(args.domain)
    emit(outcome, args.json)
    return EXIT_OK


async def cmd_delete(args: argparse.Namespace, manager: DomainManager) -> int:
    result = await manager.delete(args.domain, allow_delete=args.allow_delete)
    emit(result, args.json)
    return EXIT_OK


async def cmd_availability(args: argparse.Namespace, manager: DomainManager) -> int:
    emit(await manager.check_availability(args.domain), args.json)
    return EXIT_OK


async def cmd_price(args: argparse.Namespace, manager: DomainManager) -> int:
    emit(await manager.get_price(args.tld), args.json)
    return EXIT_OK


def cmd_config(args: argparse.Namespace) -> int:
    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH

    if args.init:
        if config_path.exists() and not args.force:
            print(f"Config file already exists: {config_path}", file=sys.stderr)
            print("Use --force to overwrite", file=sys.stderr)
            return EXIT_FAILURE
        save_config_to_file(SystemConfig(), config_path)
        print(f"Created config file: {config_path}")
        return EXIT_OK

    config = load_config(args)
    emit(config, args.json)
    return EXIT_OK


COMMANDS = {
    "register": cmd_register,
    "show": cmd_show,
    "zone": cmd_zone,
    "delete": cmd_delete,
    "availability": cmd_availability,
    "price": cmd_price,
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="domain-registrar",
        description="Register domains and safely clean up their auto-created hosted zones",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to JSON config file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Use an in-memory simulator instead of AWS. It starts "
                             "empty on every run, so show, zone locate and "
                             "delete --allow-delete find no existing domains")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--json", action="store_true", help="JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    register_parser = subparsers.add_parser("register", help="Register a domain")
    register_parser.add_argument("request", help="Path to registration request JSON")
    register_parser.add_argument(
        "--delete-hosted-zone",
        action="store_true",
        help="Delete the auto-created hosted zone if it is provably unused",
    )

    show_parser = subparsers.add_parser("show", help="Show a registered domain")
    show_parser.add_argument("domain")

    zone_parser = subparsers.add_parser("zone", help="Hosted zone operations")
    zone_parser.add_argument("zone_command", choices=["locate", "delete"])
    zone_parser.add_argument("domain")

    delete_parser = subparsers.add_parser("delete", help="Delete a domain registration")
    delete_parser.add_argument("domain")
    delete_parser.add_argument(
        "--allow-delete",
        action="store_true",
        help="DANGER: actually delete the registration",
    )

    availability_parser = subparsers.add_parser("availability", help="Check availability")
    availability_parser.add_argument("domain")

    price_parser = subparsers.add_parser("price", help="Show prices for a TLD")
    price_parser.add_argument("tld")

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument("--init", action="store_true", help="Write a default config file")
    config_parser.add_argument("--force", action="store_true", help="Overwrite existing config")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "config":
            return cmd_config(args)

        config = load_config(args)
        logger = AuditLogger.from_config(config.logging.level, config.logging.output_format)
        manager = create_manager(config, logger)
        return asyncio.run(COMMANDS[args.command](args, manager))
    except DomainRegistrarError as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
