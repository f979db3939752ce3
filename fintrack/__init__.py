"""
Finance tracker calculation library.
"""

__version__ = "0.1.0"
