# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime exceptions for rseval.

Every one of these is fatal. Nothing is retried and nothing is rolled back
beyond removing the temporary project; the CLI logs the error and exits.
A non-zero exit from cargo or from the snippet is not an error of ours and
never shows up here.
"""


class RsevalError(Exception):
    """Base for all rseval runtime failures."""


class SnippetInputError(RsevalError):
    """Raised when the snippet cannot be read from standard input."""


class MaterializeError(RsevalError):
    """Raised when the temporary Cargo project cannot be written to disk."""


class CacheError(RsevalError):
    """Raised when the target/ directory cannot be moved into or out of the cache."""


class DriverError(RsevalError):
    """Raised when cargo or the built binary cannot be launched or times out."""
