#  (C) Copyright
#  Logivations GmbH, Munich 2025
import configparser
import gzip
import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Tuple

from clients.errors import ConfigError

# most prioritized first
APP_CONFIG_PATHS: List[Tuple[str, Path]] = []

CONFIG_FILE_NAME: str = "group_export.properties"
CONFIG_SECTION: str = "group_export"

# Directory holding site specific overrides of the project configuration
STATIC_CONFIG_ENV: str = "GROUP_EXPORT_STATIC_CONFIG"

PROJECT_PATH = Path(__file__).resolve().parent.parent / "appconfig"
APP_CONFIG_PATHS.append(("PROJECT", PROJECT_PATH))
if os.environ.get(STATIC_CONFIG_ENV):
    APP_CONFIG_PATHS.insert(0, ("STATIC", Path(os.environ[STATIC_CONFIG_ENV])))


def get_expanded_appconfig(extend: str = "") -> List[str]:
    """
    The method takes the part of the path that follows ".../appconfig/" and returns the list of
    candidate files, least prioritized first, so that later files override earlier ones:
    ["project", "static"].

    Use this method if you want to pass a path to a parser.

    Example:
        get_expanded_appconfig("group_export.properties") ->
            [
                "/code/group_export/appconfig/group_export.properties",
                "${GROUP_EXPORT_STATIC_CONFIG}/group_export.properties",  # only if set
            ]
    :return: list
    """
    return [str(p / extend) for _, p in reversed(APP_CONFIG_PATHS)]


@dataclass
class ExportSettings:
    client_secret_file: str = "credentials.json"
    token_file: str = "token.json"
    customer_id: str = "my_customer"
    page_size: int = 500
    order_by: str = "email"
    header_locale: str = "en"
    strict_csv: bool = False
    log_file: Optional[str] = None
    log_path: str = "logs/"


def load_export_settings(paths: Optional[List[str]] = None) -> ExportSettings:
    """
    Read the [group_export] section of the given properties files.
    Missing files and keys fall back to the ExportSettings defaults.

    :param paths: files to read, later ones override earlier ones. Defaults to the appconfig layers
    :raises ConfigError: if a file can not be parsed or holds an invalid value
    """
    config_parser = configparser.RawConfigParser()
    try:
        config_parser.read(paths if paths is not None else get_expanded_appconfig(CONFIG_FILE_NAME))
    except configparser.Error as e:
        raise ConfigError(f"Unable to parse configuration: {e}") from e

    defaults = ExportSettings()
    if not config_parser.has_section(CONFIG_SECTION):
        return defaults

    section = config_parser[CONFIG_SECTION]
    try:
        settings = ExportSettings(
            client_secret_file=section.get("client_secret_file", defaults.client_secret_file),
            token_file=section.get("token_file", defaults.token_file),
            customer_id=section.get("customer_id", defaults.customer_id),
            page_size=section.getint("page_size", defaults.page_size),
            order_by=section.get("order_by", defaults.order_by),
            header_locale=section.get("header_locale", defaults.header_locale),
            strict_csv=section.getboolean("strict_csv", defaults.strict_csv),
            log_file=section.get("log_file", "") or None,
            log_path=section.get("log_path", defaults.log_path),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid value in [{CONFIG_SECTION}]: {e}") from e
    check_settings(settings)
    return settings


def check_settings(settings: ExportSettings) -> None:
    """
    :raises ConfigError: if a value is out of range
    """
    if settings.page_size < 1:
        raise ConfigError(f"page_size must be at least 1, got {settings.page_size}")


class CustomFormatter(logging.Formatter):
    """Logging colored formatter, adapted from https://stackoverflow.com/a/56944256/3638629"""

    # same as ROS2 https://github.com/ros2/rcutils/blob/b4a039592a1afa4654d3f0032ddd9e2b4dcab1f2/src/logging.c#L790
    white = "\033[0m"
    green = "\033[32m"
    yellow = "\033[33m"
    red = "\033[31m"
    reset = white

    def __init__(self, fmt):
        super().__init__()
        self.fmt = fmt
        self.FORMATS = {
            logging.DEBUG: self.green + self.fmt + self.reset,
            logging.INFO: self.white + self.fmt + self.reset,
            logging.WARNING: self.yellow + self.fmt + self.reset,
            logging.ERROR: self.red + self.fmt + self.reset,
            logging.CRITICAL: self.red + self.fmt + self.reset,
        }

    def format(self, record):
        """Format with color"""
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


def _rotator(source, dest):
    with open(source, "rb") as sf:
        data = sf.read()
        compressed = gzip.compress(data)
        with open(dest, "wb") as df:
            df.write(compressed)
    os.remove(source)


def setup_logging(
    file_name: Optional[str] = None,
    log_path: str = "logs/",
    level: int = logging.INFO,
    logger: logging.Logger = None,
):
    """
    Setup logging for the export run. Console output goes to stderr, stdout carries the report.
    :param file_name: Name of the logfile inside log_path. Set to None to disable writing to a file
    :param log_path: Directory of the logfile, compressed backups go to its backup/ subdirectory
    :param level: Level of the console handler, the file always gets DEBUG
    :param logger: existing logger that is to be set up, the root logger by default
    :return:
    """
    format = CustomFormatter("[%(levelname)s] [%(asctime)s] [%(name)s]: %(message)s")

    if not logger:
        logger = logging.getLogger()

    if file_name:
        log_path = os.path.join(log_path, "")
        log_path_compressed = os.path.join(log_path, "backup", "")
        os.makedirs(log_path_compressed, exist_ok=True)

        max_size = 10485760
        backup_count = 5

        rh = RotatingFileHandler(
            filename=f"{log_path}{file_name}",
            maxBytes=max_size,
            backupCount=backup_count,
        )
        rh.setLevel(logging.DEBUG)
        rh.setFormatter(format)
        rh.rotator = _rotator
        rh.namer = lambda name: name.replace(log_path, log_path_compressed) + ".gz"
        logger.addHandler(rh)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(format)
    logger.addHandler(ch)

    logger.setLevel(logging.DEBUG)
