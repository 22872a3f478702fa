"""Exception hierarchy for blockpress.

- BlockpressError: base for every error raised by the package
- ValidationError: a draft failed field validation; carries field -> message
- DecodeError: a persisted payload or draft file could not be decoded
- UnknownBlockTypeError: a block type name/code outside its variant set
- ConfigError: malformed configuration values

Collection operations never raise for unknown block ids; those are no-ops.
"""

from __future__ import annotations


class BlockpressError(Exception):
    """Base exception for blockpress."""


class ValidationError(BlockpressError):
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Validation failed for: {fields}")


class DecodeError(BlockpressError):
    pass


class UnknownBlockTypeError(DecodeError):
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown block type: {value!r}")


class ConfigError(BlockpressError):
    pass
