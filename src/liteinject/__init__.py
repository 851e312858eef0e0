"""Class decorator for static dependency injection.

This package attaches a declared dependency map to a class and wraps its
construction, so the resolved dependencies are passed as the first constructor
argument while per-call overrides stay possible.

Exports:
- `inject`: Decorator factory taking the dependency map for a class.
- `parse_injection_map`: Resolve a dependency map into a fresh dict.
- `hoist_statics`: Copy static members from one class onto another.
- `Value`: Marks an entry as a concrete value, even when it is callable.
- `Factory`: Marks an entry as a producer called with the construction arguments.
"""

from ._inject import Factory, Value, hoist_statics, inject, parse_injection_map


__all__ = ["Factory", "Value", "hoist_statics", "inject", "parse_injection_map"]
