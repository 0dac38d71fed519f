"""Domain layer — specifier rules, parsers, and graph value types.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
