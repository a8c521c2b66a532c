# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exit codes rseval uses for its own failures.

Whenever cargo or the snippet ran to completion, their exit code is passed
through untouched instead, so these only matter when rseval itself could
not get that far, or when the child died without an exit code.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3

# A child killed by a signal has no exit code to pass through.
NO_EXIT_STATUS: int = 1
