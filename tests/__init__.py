"""
Test suite for the Sauce Demo storefront and public REST APIs.

This package contains:
- unit/: browser-free tests of the shared helper library and tooling
- e2e/: Playwright browser scenarios using page objects
- api/: REST API tests using requests
- performance/: Locust load profile and CI threshold gate
"""
