"""Language detection layer.

This module scores extracted features against a corpus table.
It returns ranked language candidates for a single text.
"""
