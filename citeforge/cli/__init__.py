"""CiteForge command line interface.

Usage:
    from citeforge.cli.main import app
"""
