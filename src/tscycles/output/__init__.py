"""Output layer — Rich renderers and JSON / quiet formatters for ServiceResult."""
