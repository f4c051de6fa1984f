"""Dependency and license analysis."""
