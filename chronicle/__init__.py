"""Chronicle: audit trail and versioning for domain records."""

__version__ = "0.1.0"
