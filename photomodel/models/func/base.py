def all_subclasses(cls):
    """Every subclass of `cls`, however deeply nested."""
    return set(cls.__subclasses__()).union(
        [s for c in cls.__subclasses__() for s in all_subclasses(c)]
    )
