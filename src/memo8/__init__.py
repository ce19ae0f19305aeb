"""
memo8 - command-line client for the memo8 project memory API.

Scans a working tree and uploads it to the memo8 codebase index.
"""

__version__ = "1.0.4"
