# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Logging setup for the xmpwriter command line."""

import logging
import sys

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PACKAGE_LOGGER = "xmpwriter"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Send xmpwriter log records to stderr.

    The library itself never configures logging; the CLI calls this once.
    Module loggers propagate to the package logger, whose level is the
    only filter, so a later call can raise or lower verbosity.

    Args:
        verbose: Also show DEBUG records, e.g. minted prefixes and packet
            sizes.
        quiet: Only show errors. Takes precedence over verbose.

    Returns:
        The package logger.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Repeated calls replace the handler instead of stacking them
    package_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return package_logger
