"""
BlogQL Test Suite.

This package contains:
- unit/: Unit tests for the store, bus, façade and configuration
- integration/: GraphQL over HTTP and end-to-end scenarios
"""
