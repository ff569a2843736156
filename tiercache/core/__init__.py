"""Core Application Layer: turns CLI commands into cache operations."""
