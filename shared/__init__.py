"""Helpers shared by the storefront and API suites."""
