"""
Web presentation components for the mine-web genomic query application.

This package contains the paged results table used by the Streamlit page and
the CLI, configuration loading, a lazily-sized SPARQL result engine, and the
protein-interaction network exporter.
"""

__all__ = []
