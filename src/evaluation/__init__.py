"""Accuracy evaluation helpers.

This module samples labeled texts and measures per-language accuracy.
It backs regression checks against recorded baselines.
"""
