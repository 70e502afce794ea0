"""Core primitives shared by the filesystem operations.

Platform context, path algebra, error taxonomy, cancellation and
configuration.
"""
