"""
Command-line interface for tsqldeps.
"""
