"""Integration test package marker."""
