"""Calculator version, stamped on batch quote output."""

VERSION = "2025.11.0"
