"""
Test Actions Package
Tests for the alert engine
"""
