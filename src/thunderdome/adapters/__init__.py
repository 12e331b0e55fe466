"""Adapters implementing the core persistence contracts."""
