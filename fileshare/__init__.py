"""
File Share

Temporary file sharing service: upload a file with a lifetime, download it
by identifier until it expires.
"""

__version__ = "1.0.0"
