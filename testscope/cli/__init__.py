"""Command-line interface for testscope."""
