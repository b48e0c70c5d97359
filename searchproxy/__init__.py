"""
Search proxy translating faceted free-text queries into vector index queries.
"""

__version__ = "1.0.0"
