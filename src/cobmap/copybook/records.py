"""Record and option shapes produced by the copybook parser.

Values are kept as the raw source text (levels, integer literals, picture
digit counts); converting them to integers is the importer's job so that a
malformed number surfaces as a mapping error.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Identifier:
    name: str


# Value options


@dataclass
class IntValue:
    value: str


@dataclass
class FloatValue:
    value: str


@dataclass
class StringValue:
    value: str


@dataclass
class VariableValue:
    name: str


@dataclass
class ZeroValue:
    pass


@dataclass
class SpaceValue:
    pass


@dataclass
class HighValue:
    pass


@dataclass
class LowValue:
    pass


@dataclass
class AllStringValue:
    value: str


@dataclass
class NullValue:
    pass


# Clause options


@dataclass
class RedefinesOption:
    redefined: str


@dataclass
class ExternalOption:
    pass


@dataclass
class InternalOption:
    pass


@dataclass
class IndexUsage:
    pass


@dataclass
class PackedDecimalUsage:
    pass


@dataclass
class BinaryUsage:
    pass


@dataclass
class CompUsage:
    level: str = "0"


@dataclass
class DisplayUsage:
    pass


@dataclass
class SignOption:
    leading: bool = False
    separate: bool = False
    character: bool = False


@dataclass
class OccursOption:
    amount: IntValue | Identifier | None = None
    upper_bound: IntValue | Identifier | None = None
    depends_on: str | None = None
    keys: list[str] = field(default_factory=list)
    indexes: list[str] = field(default_factory=list)


@dataclass
class SyncOption:
    pass


@dataclass
class JustOption:
    pass


@dataclass
class BlankOption:
    pass


@dataclass
class PictureStringOption:
    picture: str


@dataclass
class PictureFormatOption:
    type: str
    digits: str | None = None
    decimal_type: str | None = None
    decimal_digits: str | None = None


Option = (
    IntValue
    | FloatValue
    | StringValue
    | VariableValue
    | ZeroValue
    | SpaceValue
    | HighValue
    | LowValue
    | AllStringValue
    | NullValue
    | RedefinesOption
    | ExternalOption
    | InternalOption
    | IndexUsage
    | PackedDecimalUsage
    | BinaryUsage
    | CompUsage
    | DisplayUsage
    | SignOption
    | OccursOption
    | SyncOption
    | JustOption
    | BlankOption
    | PictureStringOption
    | PictureFormatOption
)


# Records


@dataclass
class BasicRecord:
    level: str
    name: str | None = None
    options: list[Option] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.level} {self.name or 'FILLER'}"


@dataclass
class RenamesRecord:
    level: str
    name: str | None = None
    renamed: str | None = None
    through: str | None = None
    options: list[Option] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.level} {self.name or 'FILLER'} RENAMES {self.renamed}"


@dataclass
class ValuesRecord:
    level: str
    name: str | None = None
    values: list[str] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.level} {self.name or 'FILLER'} VALUES {' '.join(self.values)}"


Record = BasicRecord | RenamesRecord | ValuesRecord
