"""Git branch inventory and cleanup tool.

Features:
- List all branches, marking the current one and colouring stale ones
- List and clean up merged branches
- List and clean up branches whose upstream is gone
- Delete branches by name or by interactive selection
- Clean up remote branches
- master and main are never deleted
"""

__version__ = "0.1.0"
