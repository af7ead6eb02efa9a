from dataclasses import dataclass

import pytest

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
    Identifier,
    IndexUsage,
    InternalOption,
    IntValue,
    JustOption,
    LowValue,
    NullValue,
    OccursOption,
    PackedDecimalUsage,
    PictureFormatOption,
    PictureStringOption,
    RedefinesOption,
    RenamesRecord,
    SignOption,
    SpaceValue,
    StringValue,
    SyncOption,
    VariableValue,
    ZeroValue,
)
from cobmap.errors import MalformedInputError, UnknownVariantError, UnsupportedFeatureError
from cobmap.importer import UNSUPPORTED_OPTIONS, Imported, import_record


def _record(*options, level="05", name="FIELD") -> BasicRecord:
    return BasicRecord(level=level, name=name, options=list(options))


def test_basic_record_level_and_name():
    imported = import_record(_record(level="01", name="CUSTOMER-REC"))
    assert imported.level == 1
    assert imported.name == "CUSTOMER-REC"
    assert imported.is_class
    assert imported.multiplicity is None


def test_filler_record_has_no_name():
    imported = import_record(_record(PictureFormatOption(type="X", digits="3"), name=None))
    assert imported.is_filler
    assert not imported.is_class


def test_invalid_level_is_malformed():
    with pytest.raises(MalformedInputError):
        import_record(_record(level="AB"))


def test_picture_alphanumeric_is_string_with_length():
    imported = import_record(_record(PictureFormatOption(type="X", digits="10")))
    assert imported.type == "string"
    assert imported.type_length == 10
    assert not imported.type_signed


def test_picture_signed_decimal_is_float():
    option = PictureFormatOption(type="S9", digits="5", decimal_type="V", decimal_digits="2")
    imported = import_record(_record(option))
    assert imported.type == "float"
    assert imported.type_signed
    assert imported.type_decimal_length == 2


def test_picture_unsigned_numeric_is_integer():
    imported = import_record(_record(PictureFormatOption(type="9", digits="4")))
    assert imported.type == "integer"
    assert not imported.type_signed


def test_sign_option_composition():
    assert import_record(_record(SignOption())).sign == "trailing"
    assert import_record(_record(SignOption(leading=True, separate=True))).sign == (
        "leading separate"
    )
    full = SignOption(leading=True, separate=True, character=True)
    assert import_record(_record(full)).sign == "leading separate character"
    # CHARACTER only counts together with SEPARATE
    assert import_record(_record(SignOption(character=True))).sign == "trailing"


def test_redefines_comp_and_int_value_are_stored():
    imported = import_record(
        _record(RedefinesOption(redefined="OTHER"), CompUsage(level="3"), IntValue(value="42"))
    )
    assert imported.redefines == "OTHER"
    assert imported.comp_level == 3
    assert imported.int_value == 42


def test_occurs_literal_bounds_and_depends_on():
    option = OccursOption(amount=IntValue("1"), upper_bound=IntValue("9"), depends_on="CNT")
    imported = import_record(_record(option))
    assert imported.amount == 1
    assert imported.max_amount == 9
    assert imported.depends_on == "CNT"
    assert imported.multiplicity == "1..9"


def test_multiplicity_rule():
    assert Imported(level=5).multiplicity is None
    assert Imported(level=5, amount=3).multiplicity == "3"
    assert Imported(level=5, amount=0, max_amount=4).multiplicity == "0..4"


@pytest.mark.parametrize(
    ("option", "feature"),
    [
        (OccursOption(amount=Identifier("N")), "Identifier amounts"),
        (OccursOption(amount=IntValue("1"), upper_bound=Identifier("N")), "Identifier upper bounds"),
        (OccursOption(amount=IntValue("2"), keys=["K"]), "Occurs keys"),
        (OccursOption(amount=IntValue("2"), indexes=["I"]), "Occurs indexes"),
    ],
)
def test_occurs_unsupported_operands(option, feature):
    with pytest.raises(UnsupportedFeatureError) as excinfo:
        import_record(_record(option, name="ITEMS"))
    assert excinfo.value.feature == feature
    assert excinfo.value.context == "05 ITEMS"


UNSUPPORTED_INSTANCES = [
    VariableValue("X"),
    ZeroValue(),
    SpaceValue(),
    HighValue(),
    LowValue(),
    AllStringValue("*"),
    NullValue(),
    FloatValue("1.5"),
    StringValue("ABC"),
    ExternalOption(),
    InternalOption(),
    IndexUsage(),
    PackedDecimalUsage(),
    BinaryUsage(),
    DisplayUsage(),
    SyncOption(),
    JustOption(),
    BlankOption(),
    PictureStringOption("ZZ9.99"),
]


def test_every_unsupported_kind_is_covered():
    assert {type(option) for option in UNSUPPORTED_INSTANCES} == set(UNSUPPORTED_OPTIONS)


@pytest.mark.parametrize("option", UNSUPPORTED_INSTANCES, ids=lambda o: type(o).__name__)
def test_unsupported_options_fail_with_feature_name(option):
    with pytest.raises(UnsupportedFeatureError) as excinfo:
        import_record(_record(PictureFormatOption(type="X"), option))
    assert excinfo.value.feature == UNSUPPORTED_OPTIONS[type(option)]
    assert "not yet supported" in str(excinfo.value)
    assert "05 FIELD" in str(excinfo.value)


@dataclass
class Bogus:
    pass


def test_unknown_option_kind():
    with pytest.raises(UnknownVariantError, match="Unknown record option: Bogus"):
        import_record(_record(Bogus()))


def test_unknown_record_kind():
    with pytest.raises(UnknownVariantError, match="Unknown record type"):
        import_record(Bogus())


def test_renames_record_is_unsupported():
    record = RenamesRecord(level="66", name="ALIAS", renamed="A", through="B")
    with pytest.raises(UnsupportedFeatureError) as excinfo:
        import_record(record)
    assert excinfo.value.feature == "Renames records"


def test_malformed_int_literal():
    with pytest.raises(MalformedInputError):
        import_record(_record(IntValue("1x")))
