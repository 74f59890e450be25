# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   One exception type per failure class so callers can decide
#   what is fatal and what is recoverable.
#
# CLASSES:
# --------
# - SchemaSamplerError        → Base class for everything raised here
# - DataSourceError           → Store unreachable, query failed, malformed stream.
#                               Fatal: aborts the run.
# - MalformedDocumentError    → One sampled document is not a field/value mapping.
#                               Recovered: the document gets an empty shape.
# - SchemaInvariantViolation  → Internal bug (e.g. a completed shape with the
#                               wrong number of pairs).
# - InferenceCancelled        → The external cancellation signal was set.
# - ConfigError               → Invalid configuration value.
#
# ==============================================


class SchemaSamplerError(Exception):
    """Base class for all schema sampler errors."""


class DataSourceError(SchemaSamplerError):
    """The document store failed or returned something unreadable."""


class MalformedDocumentError(SchemaSamplerError):
    """A sampled document cannot be read as a field/value mapping."""


class SchemaInvariantViolation(SchemaSamplerError):
    """An internal structural invariant was broken."""


class InferenceCancelled(SchemaSamplerError):
    """The run was stopped by an external cancellation signal."""


class ConfigError(SchemaSamplerError):
    """A configuration value could not be parsed or is out of range."""
