"""
Query translation for the vector search proxy.

This module turns one search request into one vector index query:
1. Query building: validation and normalisation of request parameters
2. Filter translation: content-type and recency facets to metadata predicates
3. Hybrid payload: dense vector, optionally weighted against a sparse vector
4. Result mapping: index matches flattened into client-facing items
"""
