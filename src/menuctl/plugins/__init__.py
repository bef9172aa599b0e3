"""Extension layer — change notifications via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from menuctl.plugins.manager import PluginManager
from menuctl.plugins.notifier import ChangeNotifier

__all__ = ["ChangeNotifier", "PluginManager"]
