"""
Test API Package
Tests for HTTP endpoints
"""
