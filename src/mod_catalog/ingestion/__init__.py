"""
Ingestion layer.

Fetches release listings and release assets from GitHub and
runs each configured entry through the catalog pipeline.
"""
