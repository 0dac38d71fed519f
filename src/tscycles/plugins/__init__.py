"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``tscycles.plugins`` group.
The built-in ECMAScript plugin is always registered first.
"""

from tscycles.plugins.manager import PluginManager

__all__ = ["PluginManager"]
