"""
Internal record plumbing shared by arguments, commands and violations.

RecordType is the metaclass behind every immutable value object in argorder
(Argument, Command, Violation, FileReport). It gives each class:

- __typename__: the class name split on camel-case humps and hyphenated
  ("FileReport" -> "file-report"), used in messages and reprs.
- read-only properties for every name listed in __introspectable__, backed by
  "_{name}" attributes assigned once in __new__ (see utils.mirror).
- __repr__ / __rich_repr__ built from __displayable__ (or __introspectable__).
- value semantics: __eq__ and __hash__ over the backing fields, so two records
  built from the same input compare equal.
- sealing: classes created with sealed=True reject subclasses.

Not part of the public API; importing modules delete the name once their
classes are built.
"""
import functools
import operator
import re

from .utils import *


class RecordType(type):
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key fields.

            Example
            - argument(id='verbose', positional=False, short='v', long='verbose')
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__eq__")
        def __eq__(self, other):
            if type(other) is not type(self):
                return NotImplemented
            return _fields(self) == _fields(other)
        self.__eq__ = __eq__

        @rename("__hash__")
        def __hash__(self):
            return hash((type(self).__typename__, _fields(self)))
        self.__hash__ = __hash__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _fields(record):
    """Backing values of every introspectable field, in declaration order."""
    return tuple(getattr(record, "_" + name) for name in type(record).__introspectable__)


__all__ = ("RecordType",)
