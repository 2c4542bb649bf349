"""
Argmatch utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the arguments, converters and parser layers.
- Stable enough to import, but designed primarily for the package's own use.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “value not provided”, distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; keep None/0/""/[] untouched.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr), handing out
    copies of containers so descriptor metadata cannot be mutated through the API.

- collapse(text)
  • Collapse whitespace runs to single spaces and trim both ends.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> collapse("  -n   42 ")
    '-n 42'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for a value that was not provided.

    Used wherever None is a legitimate user value (a default of None, a value
    name of None) and the API still needs to tell “omitted” apart.

    Characteristics
    - bool(Unset) is False.
    - repr(Unset) is "Unset".
    - UnsetType() always yields the same instance.
    - Sealed: subclassing raises TypeError.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object, or default when object is the Unset sentinel.

    Falsey values (None, 0, "", []) are returned as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator

    Raises
    - TypeError: wrong arity, non-callable target, non-string name, or a
      callable whose names cannot be updated (some built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Recursively copy containers so callers never hold the backing object.

    Tuples stay tuples (descriptor aliases are exposed as tuples); other
    sequences become lists, mappings become dicts, sets become sets. Anything
    else is returned unchanged.
    """
    if isinstance(object, tuple):
        return tuple(map(_detach, object))
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property backed by the private attribute "_{name}".

    Container values are copied on every read (see _detach).

    Example
    - Given self._definitions, declare definitions = mirror("definitions").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


def collapse(text, /):
    """
    Collapse every whitespace run into a single space and trim both ends.

    Both matching modes and the positional stripper work on this normalized
    form, so offsets computed on it stay consistent between them.
    """
    if not isinstance(text, str):
        raise TypeError("collapse() argument must be a string")
    return re.sub(r"\s+", " ", text).strip()


Unset = UnsetType()
"""
Sentinel for “not provided”.

Use Unset as a parameter default when None is a meaningful user value, then
materialize it with coalesce(value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "collapse",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
