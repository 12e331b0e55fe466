"""Core domain: types, errors and persistence contracts."""
