"""
Built-in drawing algorithms.

Each module exposes ``register(registry)``; see
``mandalaflow.core.registry.load_builtin_algorithms``.
"""
