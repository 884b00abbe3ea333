"""Language profile and corpus layer.

This module models trained n-gram profiles and assembles them into
one indexed probability table shared by detectors.
"""
