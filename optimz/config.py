"""config: shared settings and logging setup for optimz."""

import logging

DEBUG = False

BACKUP_SUFFIX = ".bak"
ELF_MAGIC = b"\x7fELF"
DEFAULT_PASSES = 1

# ----------------------------------------------------------------------------
# LOGGING CONFIGURATION


class CustomFormatter(logging.Formatter):
    """custom logging format
    """
    grey = "\x1b[38;20m"
    green = "\x1b[32;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    fmt = "%(asctime)s - {}%(levelname)-8s{} - %(name)s - %(message)s"

    FORMATS = {
        logging.DEBUG: fmt.format(grey, reset),
        logging.INFO: fmt.format(green, reset),
        logging.WARNING: fmt.format(yellow, reset),
        logging.ERROR: fmt.format(red, reset),
        logging.CRITICAL: fmt.format(bold_red, reset),
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt="%H:%M:%S")
        return formatter.format(record)


def configure_logging(verbose: bool = False):
    """send colored log records to stderr"""
    handler = logging.StreamHandler()
    handler.setFormatter(CustomFormatter())
    logging.basicConfig(
        level=logging.DEBUG if (DEBUG or verbose) else logging.INFO,
        handlers=[handler],
        force=True,
    )
