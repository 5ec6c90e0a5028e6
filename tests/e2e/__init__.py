"""
Browser test package for the Sauce Demo storefront.

This package contains Playwright-based scenarios and demonstrates:
- Page Object Model (POM) pattern for locators and assertions
- A shared helper layer for multi-step operations and waits
- data-test attribute locators
- Failure artifacts (screenshot, video, trace) kept only on failure
"""
