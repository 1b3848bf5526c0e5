"""
Test Services Package
Tests for log reconciliation and the missed dose job
"""
