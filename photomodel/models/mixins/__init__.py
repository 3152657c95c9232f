from .transform import EllipticalMixin

__all__ = ("EllipticalMixin",)
