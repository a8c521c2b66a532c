# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for rseval.

The one-time setup before a run does anything:
  1. Validate the interpreter
  2. Point every rseval logger at the run's level and optional log file
  3. Log what we're running on

After bootstrap the logging tree is in its final state, so anything logged
from here on respects --log-level.
"""

import logging
from pathlib import Path
from typing import Optional

from rseval.config.schema import RsevalConfig
from rseval.logging.logger import configure_logging
from rseval.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: RsevalConfig, log_level: Optional[str] = None) -> logging.Logger:
    """
    Run the bootstrap sequence and return the root rseval logger.

    Args:
        config: The validated configuration (from a file or the defaults).
        log_level: Command-line override for config.global_config.log_level.
    """
    check_minimum_python()

    global_config = config.global_config
    log_file = Path(global_config.log_file) if global_config.log_file is not None else None
    logger = configure_logging(log_level or global_config.log_level, log_file=log_file)

    system_info = get_system_info()
    logger.debug(
        "rseval bootstrap complete",
        extra={
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
    return logger
