from . import conversions, decorators, integration

__all__ = [
    "decorators",
    "integration",
    "conversions",
]
