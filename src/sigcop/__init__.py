"""
SigCop: Sorbet signature checks with autocorrection for Ruby sources.
"""

__version__ = "0.1.0"
