"""Integration tests for infrastructure adapters."""
