"""Building blocks for a key-value store: status values, coding, hashing, checksums, filters, caching, an arena, logging and file access."""

__version__ = "0.1.0"