"""HTTP API for table views and school records."""
