"""
SPARQL access for mine-web: the HTTP client, endpoint resolution from
configuration, and the lazily-sized result sequences that back paged tables.
"""
