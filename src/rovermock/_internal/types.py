"""Shared type aliases used across rovermock modules."""

from collections.abc import Callable
from random import Random
from typing import Any, TypeAlias

# Route handler: a function with a variable, injected signature
Handler: TypeAlias = Callable[..., Any]

# Zero-argument factory registered with MockServer.provide()
Factory: TypeAlias = Callable[[], Any]

# Source of randomness; any random.Random (or subclass) works
RandomSource: TypeAlias = Random
