"""Domain models and errors for testscope."""
