"""
Locust scenario user classes.

- :mod:`.reader`: read-heavy browsing of posts, comments and users with
  occasional fake writes against the public placeholder API
"""
