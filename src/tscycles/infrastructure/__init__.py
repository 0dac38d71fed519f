"""Infrastructure layer — filesystem probing, tsconfig loading, graph traversal.

This layer may import from domain and config, never from services,
commands, or output. The service layer turns its results into
ServiceResult payloads.
"""
