from inspect import cleandoc

__all__ = ("classproperty", "combine_docstrings")


class classproperty:
    def __init__(self, fget):
        self.fget = fget

    def __get__(self, instance, owner):
        return self.fget(owner)


def combine_docstrings(cls):
    """Append the docstrings of the direct bases to a class docstring, so
    that parameters documented on a parent show up on the subclass."""
    try:
        combined_docs = [cleandoc(cls.__doc__)]
    except AttributeError:
        combined_docs = []
    for base in cls.__bases__:
        if base.__doc__:
            combined_docs.append(f"\n\n> SUBUNIT {base.__name__}\n\n{cleandoc(base.__doc__)}")
    cls.__doc__ = "\n".join(combined_docs).strip()
    return cls
