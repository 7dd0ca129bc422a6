"""Clients for gathering source-control metadata.

These modules fetch data from external sources (the GitHub commits API)
for the enricher to reduce into render-context fields.
"""
