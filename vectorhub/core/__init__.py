"""
Core domain logic: ingestion pipeline, analytics engines and exceptions.
"""
