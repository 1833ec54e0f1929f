"""
lfscheck: compliance harness for Git LFS API servers.

Runs an ordered set of batch API checks against a server, using object IDs
that are either read from files or synthesized deterministically.
"""

__version__ = "0.3.0"
