"""tscycles — import cycle detection for JavaScript and TypeScript monorepos."""

__version__ = "0.1.0"
