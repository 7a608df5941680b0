"""
Tests for tokentransfer.
"""
