"""Dependency graph construction, cycle enhancement, and NetworkX export."""
