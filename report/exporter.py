#  (C) Copyright
#  Logivations GmbH, Munich 2025
import argparse
import logging
import sys
from typing import Callable, List, Optional

from clients.credential_store import CredentialStore, prompt_for_code
from clients.directory_client import DirectoryClient
from clients.errors import ConfigError, ExportError
from report.generator import ReportGenerator
from report.schemas import CsvHeaders, ReportSummary
from tools.utils import (
    CONFIG_FILE_NAME,
    ExportSettings,
    check_settings,
    get_expanded_appconfig,
    load_export_settings,
    setup_logging,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Export every group of a Google Workspace customer with its aliases and members as CSV."
    )
    p.add_argument("--config", action="append", help="Properties file overriding the appconfig layers (repeatable)")
    p.add_argument("--client-secret", help="OAuth client JSON file (from Google Cloud Console)")
    p.add_argument("--token-file", help="Where the user token is cached")
    p.add_argument("--customer", help='Customer ID, "my_customer" for the authenticated account')
    p.add_argument("--page-size", type=int, help="Groups per request, at most 500")
    p.add_argument("--strict-csv", action="store_true", default=None, help="Quote fields per RFC 4180")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug output on stderr")
    return p.parse_args(argv)


def apply_overrides(settings: ExportSettings, args: argparse.Namespace) -> ExportSettings:
    """Command line flags take precedence over the properties files.

    :raises ConfigError: if an overridden value is out of range
    """
    if args.client_secret:
        settings.client_secret_file = args.client_secret
    if args.token_file:
        settings.token_file = args.token_file
    if args.customer:
        settings.customer_id = args.customer
    if args.page_size is not None:
        settings.page_size = args.page_size
    if args.strict_csv is not None:
        settings.strict_csv = args.strict_csv
    check_settings(settings)
    return settings


def export_groups(
    settings: ExportSettings,
    out=None,
    prompt: Callable[[str], str] = prompt_for_code,
    directory_client: Optional[DirectoryClient] = None,
) -> ReportSummary:
    """Authorize, then write the group report for the configured customer."""
    try:
        header = CsvHeaders.for_locale(settings.header_locale)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    if directory_client is None:
        store = CredentialStore(settings.client_secret_file, settings.token_file, prompt=prompt)
        directory_client = DirectoryClient(credentials=store.get_credentials())

    generator = ReportGenerator(
        directory_client,
        out=out,
        page_size=settings.page_size,
        order_by=settings.order_by,
        header=header,
        strict_csv=settings.strict_csv,
    )
    return generator.run(settings.customer_id)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        paths = get_expanded_appconfig(CONFIG_FILE_NAME) + (args.config or [])
        settings = apply_overrides(load_export_settings(paths), args)
    except ConfigError as e:
        setup_logging()
        logger.critical(f"{e}")
        return 1

    setup_logging(
        settings.log_file,
        settings.log_path,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    try:
        export_groups(settings)
    except ExportError as e:
        logger.critical(f"{e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
