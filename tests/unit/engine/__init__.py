"""
Tests for the resolution engine.
"""
