"""Utility modules for treewright."""
