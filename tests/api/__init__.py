"""API tests against the public JSONPlaceholder and ReqRes services."""
