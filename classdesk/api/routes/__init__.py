"""API routers, mounted under /v1 by classdesk.api.main."""
