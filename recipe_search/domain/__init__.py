"""
Domain layer - Core recipe entities and domain errors.

This layer contains the read-only views the search engine scores,
independent of any storage or HTTP concerns.
"""
