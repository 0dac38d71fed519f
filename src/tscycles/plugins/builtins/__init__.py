"""Built-in plugins shipped with tscycles."""
