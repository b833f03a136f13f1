"""School records - validated demo data behind the table views.

Records live in memory, seeded from YAML; there is no database engine.
"""
