"""
Performance testing package (Locust-based).

Contains a read-heavy Locust profile for the public placeholder API,
request helpers, and a CI threshold checker.

Browser timing checks (page load, login duration) live with the e2e
suite; this package targets the JSON API layer only.
"""
