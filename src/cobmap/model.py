"""Class model produced from a copybook.

Links between classes are by name only: an association target or a
superclass may name a class that appears later in ``Model.classes`` or not at
all.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Property:
    name: str
    type: str
    signed: bool = False


@dataclass
class Association:
    source: Class = field(repr=False, compare=False)
    target: str | None
    multiplicity: str | None = None
    depends_on: str | None = None


@dataclass
class Class:
    name: str
    superclass: str | None = None
    properties: list[Property] = field(default_factory=list)
    associations: list[Association] = field(default_factory=list)

    def add_property(self, name: str, type: str, signed: bool = False) -> Property:
        prop = Property(name=name, type=type, signed=signed)
        self.properties.append(prop)
        return prop

    def associate(
        self, target: str | None, multiplicity: str | None = None, depends_on: str | None = None
    ) -> Association:
        association = Association(
            source=self, target=target, multiplicity=multiplicity, depends_on=depends_on
        )
        self.associations.append(association)
        return association

    @property
    def last_property(self) -> Property | None:
        return self.properties[-1] if self.properties else None


@dataclass
class Model:
    classes: list[Class] = field(default_factory=list)
