"""
Tests for tokentransfer utilities.
"""
