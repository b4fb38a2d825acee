"""
Boundary layer: persistence, blob storage and embedding model adapters.
"""
