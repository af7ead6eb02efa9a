"""Rebuild nested scope from the flat, level-numbered record stream.

The builder is a reducer: every imported record first closes the scopes it
dedents out of, then either adds a property to the current class or opens a
new class. A group that REDEFINES the field declared right before it turns
that field into a base class: the field is dropped from the current class, the
current class gets an association to the base, and the base becomes the
current scope for the following siblings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cobmap.copybook.parser import parse_copybook
from cobmap.copybook.records import Record
from cobmap.errors import MalformedInputError
from cobmap.importer import Imported, import_record
from cobmap.model import Class, Model

ROOT_LEVEL = 0


@dataclass
class Scope:
    level: int
    klass: Class | None = None


class HierarchyBuilder:
    """Single-use reducer from ``Imported`` bundles to a ``Model``."""

    def __init__(self) -> None:
        self.model = Model()
        self._scopes: list[Scope] = []
        self._finished = False

    @property
    def current(self) -> Class | None:
        if not self._scopes:
            return None
        return self._scopes[-1].klass

    def _open(self, level: int, klass: Class) -> None:
        self._scopes.append(Scope(level=level, klass=klass))

    def _close_to(self, level: int) -> None:
        if not self._scopes:
            self._scopes.append(Scope(level=ROOT_LEVEL))  # lazy init
        if level <= ROOT_LEVEL:
            raise MalformedInputError(f"Level numbers must be positive, got {level}")
        while self._scopes[-1].klass is not None and self._scopes[-1].level >= level:
            # a sibling or shallower item arrived, so this subtree is complete
            self.model.classes.append(self._scopes.pop().klass)

    def reduce(self, imported: Imported) -> None:
        if self._finished:
            raise RuntimeError("HierarchyBuilder has already been finished")
        self._close_to(imported.level)

        if imported.is_class:
            self._open_class(imported)
        elif not imported.is_filler:
            current = self.current
            if current is None:
                raise MalformedInputError(
                    f"Field {imported.name} is declared outside of any group"
                )
            current.add_property(imported.name, imported.type, imported.type_signed)

    def _open_class(self, imported: Imported) -> None:
        current = self.current
        if current is not None:
            if imported.redefines is None:
                current.associate(
                    imported.name,
                    multiplicity=imported.multiplicity,
                    depends_on=imported.depends_on,
                )
            else:
                # only a redefinition of the immediately preceding field is rewritten
                last = current.last_property
                if last is not None and last.name == imported.redefines:
                    current.properties.pop()
                    current.associate(imported.redefines)
                    self._open(self._scopes[-1].level, Class(name=imported.redefines))
        self._open(imported.level, Class(name=imported.name, superclass=imported.redefines))

    def finish(self) -> Model:
        """Close every open scope, root last, and return the model."""
        while self._scopes:
            scope = self._scopes.pop()
            if scope.klass is not None:
                self.model.classes.append(scope.klass)
        self._finished = True
        return self.model


def build_model(records: Iterable[Record]) -> Model:
    """Import and reduce a record stream; any failure aborts the whole build."""
    builder = HierarchyBuilder()
    for record in records:
        builder.reduce(import_record(record))
    return builder.finish()


def map_copybook(text: str) -> Model:
    return build_model(parse_copybook(text))
