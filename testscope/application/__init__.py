"""Application use cases for testscope."""
