"""
Side-by-side folder comparison with bulk copy, move and delete.
"""

__version__ = "1.0.0"
