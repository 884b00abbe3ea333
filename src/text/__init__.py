"""Text preparation layer.

This module cleans raw input and derives n-gram features from it.
It feeds both profile training and language detection.
"""
