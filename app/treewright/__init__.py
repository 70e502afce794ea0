"""treewright - filesystem lifecycle primitives.

Reliable creation, relocation and deletion of directory trees, plus
deterministic path algebra.
"""

__version__ = "0.1.0"
