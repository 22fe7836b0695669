"""Shared utilities with no layer dependencies."""
