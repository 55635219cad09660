"""Command line entry points for fftsearch."""
