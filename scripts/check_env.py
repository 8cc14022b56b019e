"""Utility for verifying the dashboard's environment configuration.

The tool performs three checks:

1. It attempts to instantiate ``AppSettings`` using the provided ``.env`` file,
   surfacing a missing service account key or spreadsheet id before the
   dashboard starts answering with errors.
2. It confirms the service account key is a JSON document with the fields the
   Google client needs.
3. It can record and verify a checksum for the ``.env`` file so unexpected
   edits are detected.

Example usages::

    python -m scripts.check_env record --env-file /srv/dashboard/.env \
        --hash-file /srv/dashboard/.env.sha256

    python -m scripts.check_env verify --env-file /srv/dashboard/.env \
        --hash-file /srv/dashboard/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import json
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from ops_dashboard.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5

SERVICE_ACCOUNT_FIELDS = ("client_email", "private_key", "token_uri")


class ServiceAccountKeyError(ValueError):
    """Raised when the service account key is not usable."""


def _compute_hash(env_file: Path) -> str:
    """Return the SHA256 checksum for the target environment file."""
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _check_service_account_key(raw_key: str) -> None:
    try:
        info = json.loads(raw_key)
    except ValueError as exc:
        raise ServiceAccountKeyError(
            "GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON."
        ) from exc
    if not isinstance(info, dict):
        raise ServiceAccountKeyError("GOOGLE_SERVICE_ACCOUNT_KEY must be a JSON object.")
    missing = [field for field in SERVICE_ACCOUNT_FIELDS if not info.get(field)]
    if missing:
        raise ServiceAccountKeyError(
            "GOOGLE_SERVICE_ACCOUNT_KEY is missing: " + ", ".join(missing)
        )


def _validate_settings(env_file: Path) -> AppSettings:
    """Ensure required settings can be loaded from the supplied env file."""
    _load_env_file(str(env_file))
    settings = AppSettings()  # type: ignore[call-arg]
    _check_service_account_key(settings.google.service_account_key)
    return settings


def _describe(settings: AppSettings) -> int:
    print(f"Invoice spreadsheet: {settings.google.invoice_sheet_id}")
    print(f"Payslip spreadsheet: {settings.google.payslip_sheet_id}")
    print(f"Tickets tab:         {settings.google.tickets_sheet_name}")
    print(f"Name matching:       {settings.name_match_mode}")
    print(f"Timezone:            {settings.timezone}")
    print(f"Cache TTL (s):       {settings.cache.ttl_seconds:g}")
    enabled = "enabled" if settings.material_search.webhook_url else "disabled"
    print(f"Material search:     {enabled}")
    return EXIT_OK


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    """Persist the current checksum to ``hash_file``."""
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    """Compare the current checksum to the recorded baseline."""
    if not hash_file.exists():
        print(
            f"Expected checksum file {hash_file} is missing. "
            "Re-run with the 'record' command to establish a baseline.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected == actual:
        print("Environment checksum OK.")
        return EXIT_OK

    print(
        "Environment checksum mismatch!\n"
        f"  expected: {expected}\n"
        f"  actual:   {actual}\n"
        "Investigate recent changes before restarting the dashboard.",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate dashboard settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the repo root).",
        )

    def add_hash_argument(subparser: argparse.ArgumentParser, help_text: str) -> None:
        subparser.add_argument("--hash-file", required=True, type=Path, help=help_text)

    record_parser = subparsers.add_parser(
        "record", help="Validate settings and store the checksum baseline."
    )
    add_common_arguments(record_parser)
    add_hash_argument(record_parser, "Location to write the checksum baseline.")

    verify_parser = subparsers.add_parser(
        "verify", help="Validate settings and compare the checksum with the baseline."
    )
    add_common_arguments(verify_parser)
    add_hash_argument(verify_parser, "Location of the previously recorded baseline.")

    check_parser = subparsers.add_parser(
        "check", help="Validate settings and print a summary of what is configured."
    )
    add_common_arguments(check_parser)

    return parser


def _ensure_env_file(env_file: Path) -> None:
    if not env_file.exists():
        raise FileNotFoundError(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool."
        )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file

    try:
        _ensure_env_file(env_file)
        settings = _validate_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except ServiceAccountKeyError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    command: str = args.command
    handlers: dict[str, Callable[[], int]] = {
        "record": lambda: _record_checksum(env_file, args.hash_file),
        "verify": lambda: _verify_checksum(env_file, args.hash_file),
        "check": lambda: _describe(settings),
    }
    return handlers[command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
