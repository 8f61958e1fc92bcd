"""
Support layer for shared fleet utilities.

Provides centralized helpers for fleet directory resolution, spawned-process
environments, and the declarative fleet.yaml configuration used across the
CLI, process manager, and fleet manager.
"""
