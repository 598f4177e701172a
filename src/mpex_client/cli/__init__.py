"""Command-line entry points for the MPEx client."""
