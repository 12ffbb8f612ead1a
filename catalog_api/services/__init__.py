"""Business logic services.

Services contain all query-construction and normalization logic and are
called by routes. The query compiler and normalizer are pure; only
`catalog` talks to the database.
"""
