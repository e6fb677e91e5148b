"""
Adapters for the testscope system.

Filesystem access, scanning and process execution live here; the
application layer only wires them together.
"""
