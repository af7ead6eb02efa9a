"""Flatten one copybook record into an attribute bundle for the builder.

Each option kind maps to a handler in ``OPTION_HANDLERS``; kinds the mapper
recognizes but does not handle are listed in ``UNSUPPORTED_OPTIONS`` together
with the feature name reported to the user. Anything else is an unknown
variant and means the parser produced something this module was not taught.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from cobmap.copybook.records import (
    AllStringValue,
    BasicRecord,
    BinaryUsage,
    BlankOption,
    CompUsage,
    DisplayUsage,
    ExternalOption,
    FloatValue,
    HighValue,
    IndexUsage,
    InternalOption,
    IntValue,
    JustOption,
    LowValue,
    NullValue,
    OccursOption,
    Option,
    PackedDecimalUsage,
    PictureFormatOption,
    PictureStringOption,
    Record,
    RedefinesOption,
    RenamesRecord,
    SignOption,
    SpaceValue,
    StringValue,
    SyncOption,
    ValuesRecord,
    VariableValue,
    ZeroValue,
)
from cobmap.errors import MalformedInputError, UnknownVariantError, UnsupportedFeatureError


@dataclass
class Imported:
    level: int
    name: str | None = None
    int_value: int = 0
    redefines: str | None = None
    comp_level: int = 0
    sign: str | None = None
    amount: int = 0
    max_amount: int = 0
    depends_on: str | None = None
    type: str | None = None
    type_length: int = 0
    type_signed: bool = False
    type_decimal_length: int = 0

    @property
    def is_filler(self) -> bool:
        return self.name is None

    @property
    def is_class(self) -> bool:
        """Named items without a scalar type open a nesting scope."""
        return not self.is_filler and self.type is None

    @property
    def multiplicity(self) -> str | None:
        if self.amount + self.max_amount == 0:
            return None
        if self.max_amount > 0:
            return f"{self.amount}..{self.max_amount}"
        return str(self.amount)


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"Invalid {what}: {text!r}") from exc


def _import_int_value(option: IntValue, imported: Imported) -> None:
    imported.int_value = _parse_int(option.value, "integer literal")


def _import_redefines(option: RedefinesOption, imported: Imported) -> None:
    imported.redefines = option.redefined


def _import_comp_usage(option: CompUsage, imported: Imported) -> None:
    imported.comp_level = _parse_int(option.level, "comp level")


def _import_sign(option: SignOption, imported: Imported) -> None:
    sign = "leading" if option.leading else "trailing"
    if option.separate:
        sign += " separate"
        if option.character:
            sign += " character"
    imported.sign = sign


def _import_occurs(option: OccursOption, imported: Imported) -> None:
    if option.amount is not None:
        if not isinstance(option.amount, IntValue):
            raise UnsupportedFeatureError("Identifier amounts")
        imported.amount = _parse_int(option.amount.value, "occurs amount")
    if option.upper_bound is not None:
        if not isinstance(option.upper_bound, IntValue):
            raise UnsupportedFeatureError("Identifier upper bounds")
        imported.max_amount = _parse_int(option.upper_bound.value, "occurs upper bound")
    if option.depends_on is not None:
        imported.depends_on = option.depends_on
    if option.keys:
        raise UnsupportedFeatureError("Occurs keys")
    if option.indexes:
        raise UnsupportedFeatureError("Occurs indexes")


def _import_picture_format(option: PictureFormatOption, imported: Imported) -> None:
    code = option.type.upper()
    if code.startswith(("A", "X")):
        # alphabetic or alphanumeric
        imported.type = "string"
        if option.digits is not None:
            imported.type_length = _parse_int(option.digits, "picture length")
        return
    # numeric
    if code.startswith("S"):
        imported.type_signed = True
    if option.decimal_type is None:
        imported.type = "integer"
    else:
        imported.type = "float"
        if option.decimal_digits is not None:
            imported.type_decimal_length = _parse_int(
                option.decimal_digits, "picture decimal length"
            )


OPTION_HANDLERS: dict[type, Callable[[Option, Imported], None]] = {
    IntValue: _import_int_value,
    RedefinesOption: _import_redefines,
    CompUsage: _import_comp_usage,
    SignOption: _import_sign,
    OccursOption: _import_occurs,
    PictureFormatOption: _import_picture_format,
}

UNSUPPORTED_OPTIONS: dict[type, str] = {
    VariableValue: "Variable value options",
    ZeroValue: "Zero value options",
    SpaceValue: "Space value options",
    HighValue: "High value options",
    LowValue: "Low value options",
    AllStringValue: "AllString value options",
    NullValue: "Null value options",
    FloatValue: "Float value options",
    StringValue: "String value options",
    ExternalOption: "External options",
    InternalOption: "Internal options",
    IndexUsage: "Index usages",
    PackedDecimalUsage: "Packed decimal usages",
    BinaryUsage: "Binary usages",
    DisplayUsage: "Display usages",
    SyncOption: "Sync options",
    JustOption: "Just options",
    BlankOption: "Blank options",
    PictureStringOption: "Picture string options",
}

UNSUPPORTED_RECORDS: dict[type, str] = {
    RenamesRecord: "Renames records",
    ValuesRecord: "Values records",
}


def import_option(option: Option, imported: Imported, record: Record | None = None) -> None:
    """Apply one option clause to ``imported`` in place."""
    context = str(record) if record is not None else None
    kind = type(option)
    if kind in UNSUPPORTED_OPTIONS:
        raise UnsupportedFeatureError(UNSUPPORTED_OPTIONS[kind], context)
    handler = OPTION_HANDLERS.get(kind)
    if handler is None:
        raise UnknownVariantError(
            f"Unknown record option: {kind.__name__}" + (f" from {context}" if context else "")
        )
    try:
        handler(option, imported)
    except UnsupportedFeatureError as exc:
        if exc.context is None and context is not None:
            raise UnsupportedFeatureError(exc.feature, context) from exc
        raise


def import_basic_record(record: BasicRecord) -> Imported:
    imported = Imported(level=_parse_int(record.level, "level number"), name=record.name)
    for option in record.options:
        import_option(option, imported, record)
    return imported


def import_record(record: Record) -> Imported:
    """Turn one parsed record into an ``Imported`` bundle, or fail."""
    kind = type(record)
    if kind in UNSUPPORTED_RECORDS:
        raise UnsupportedFeatureError(UNSUPPORTED_RECORDS[kind], str(record))
    if kind is BasicRecord:
        return import_basic_record(record)
    raise UnknownVariantError(f"Unknown record type: {kind.__name__}")
