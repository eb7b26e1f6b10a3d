"""
Repository layer for data access operations.

This package contains the document store gateway, identifier allocation,
the shared create/edit/append steps, read-time view formatting, and one
repository module per entity type.
"""
