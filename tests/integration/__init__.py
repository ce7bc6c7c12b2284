"""Integration tests for mealplanner.

These tests require a running PostgreSQL instance.
"""
