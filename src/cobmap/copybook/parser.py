"""Tokenizing copybook parser producing the record stream for the mapper.

Supports the data description entries the mapper knows about:
- level + name / FILLER (name optional)
- REDEFINES, EXTERNAL, INTERNAL/GLOBAL
- inline `*>` comments outside literals
- PIC/PICTURE: [S]9, A, X runs with optional (n) and optional V9 decimals;
  anything else is kept as a free-form picture string
- USAGE COMP[-n]/COMPUTATIONAL[-n], BINARY, PACKED-DECIMAL, DISPLAY, INDEX
- SIGN LEADING/TRAILING [SEPARATE [CHARACTER]]
- OCCURS n [TO m] [TIMES] [DEPENDING ON x] [ASCENDING/DESCENDING KEY ...] [INDEXED BY ...]
- SYNC, JUST, BLANK WHEN ZERO, VALUE literals
- level 66 RENAMES and level 88 condition values as their own record kinds
Fixed-format sequence and indicator columns are not stripped.
"""

from __future__ import annotations

import re

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
from cobmap.errors import CopybookSyntaxError

_WORD = r"(?:(?!\*>)[^\s.])+"
TOKEN_RE = re.compile(
    r"\"[^\"]*\"|'[^']*'|\*>[^\n]*|[+-]?\.\d+|" + _WORD + r"(?:\." + _WORD + r")*|\."
)
INT_RE = re.compile(r"^[+-]?\d+$")
FLOAT_RE = re.compile(r"^[+-]?\d*\.\d+$")
COMP_RE = re.compile(r"^COMP(?:UTATIONAL)?(?:-(\d+))?$")
PICTURE_FORMAT_RE = re.compile(
    r"^(?P<sign>S)?(?P<run>9+|A+|X+)(?:\((?P<digits>\d+)\))?"
    r"(?:(?P<decimal>V)(?P<drun>9+)?(?:\((?P<ddigits>\d+)\))?)?$"
)

RENAMES_LEVEL = "66"
CONDITION_LEVEL = "88"

KEYWORDS = {
    "ARE",
    "ASCENDING",
    "BINARY",
    "BLANK",
    "BY",
    "CHARACTER",
    "DEPENDING",
    "DESCENDING",
    "DISPLAY",
    "EXTERNAL",
    "GLOBAL",
    "INDEX",
    "INDEXED",
    "INTERNAL",
    "IS",
    "JUST",
    "JUSTIFIED",
    "KEY",
    "LEADING",
    "OCCURS",
    "ON",
    "PACKED-DECIMAL",
    "PIC",
    "PICTURE",
    "REDEFINES",
    "RENAMES",
    "SEPARATE",
    "SIGN",
    "SYNC",
    "SYNCHRONIZED",
    "THROUGH",
    "THRU",
    "TIMES",
    "TO",
    "TRAILING",
    "USAGE",
    "VALUE",
    "VALUES",
    "WHEN",
}

FIGURATIVE_VALUES = {
    "ZERO": ZeroValue,
    "ZEROS": ZeroValue,
    "ZEROES": ZeroValue,
    "SPACE": SpaceValue,
    "SPACES": SpaceValue,
    "HIGH-VALUE": HighValue,
    "HIGH-VALUES": HighValue,
    "LOW-VALUE": LowValue,
    "LOW-VALUES": LowValue,
    "NULL": NullValue,
    "NULLS": NullValue,
}


def _is_keyword(token: str) -> bool:
    return token.upper() in KEYWORDS or COMP_RE.match(token.upper()) is not None


def iter_entries(text: str) -> list[list[str]]:
    """Split copybook text into period-terminated, tokenized entries."""
    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("*"):
            continue
        lines.append(line)

    entries: list[list[str]] = []
    current: list[str] = []
    for token in TOKEN_RE.findall("\n".join(lines)):
        if token.startswith("*>"):
            continue
        if token == ".":
            if current:
                entries.append(current)
            current = []
        else:
            current.append(token)
    if current:
        entries.append(current)
    return entries


class _EntryParser:
    def __init__(self, tokens: list[str]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.text = " ".join(tokens)

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def peek_upper(self) -> str | None:
        token = self.peek()
        return token.upper() if token is not None else None

    def next(self, what: str = "token") -> str:
        token = self.peek()
        if token is None:
            raise CopybookSyntaxError(f"Expected {what}", self.text)
        self.pos += 1
        return token

    def accept(self, *words: str) -> str | None:
        token = self.peek_upper()
        if token is not None and token in words:
            self.pos += 1
            return token
        return None

    def expect(self, *words: str) -> str:
        token = self.accept(*words)
        if token is None:
            raise CopybookSyntaxError(f"Expected {' or '.join(words)}", self.text)
        return token

    def names(self) -> list[str]:
        found: list[str] = []
        while self.peek() is not None and not _is_keyword(self.peek()):
            found.append(self.next())
        return found

    def parse(self) -> Record:
        level = self.next("level number")
        name: str | None = None
        token = self.peek()
        if token is not None and not _is_keyword(token):
            self.pos += 1
            name = None if token.upper() == "FILLER" else token

        if level == RENAMES_LEVEL:
            self.expect("RENAMES")
            renamed = self.next("renamed item")
            through = self.next("renamed item") if self.accept("THRU", "THROUGH") else None
            self._ensure_done()
            return RenamesRecord(level=level, name=name, renamed=renamed, through=through)
        if level == CONDITION_LEVEL:
            self.expect("VALUE", "VALUES")
            self.accept("IS", "ARE")
            values: list[str] = []
            while self.peek() is not None:
                values.append(self.next())
            return ValuesRecord(level=level, name=name, values=values)

        options: list[Option] = []
        while self.peek() is not None:
            options.append(self.parse_option())
        return BasicRecord(level=level, name=name, options=options)

    def _ensure_done(self) -> None:
        if self.peek() is not None:
            raise CopybookSyntaxError(f"Unexpected token {self.peek()!r}", self.text)

    def parse_option(self) -> Option:
        word = self.next().upper()
        if word == "REDEFINES":
            return RedefinesOption(redefined=self.next("redefined item"))
        if word == "EXTERNAL":
            return ExternalOption()
        if word in ("INTERNAL", "GLOBAL"):
            return InternalOption()
        if word in ("PIC", "PICTURE"):
            self.accept("IS")
            return parse_picture(self.next("picture string"))
        if word == "USAGE":
            self.accept("IS")
            return self.parse_usage(self.next("usage").upper())
        if word in ("SIGN", "LEADING", "TRAILING"):
            if word == "SIGN":
                self.accept("IS")
                word = self.expect("LEADING", "TRAILING")
            separate = self.accept("SEPARATE") is not None
            character = separate and self.accept("CHARACTER") is not None
            return SignOption(leading=word == "LEADING", separate=separate, character=character)
        if word == "OCCURS":
            return self.parse_occurs()
        if word in ("SYNC", "SYNCHRONIZED"):
            self.accept("LEFT", "RIGHT")
            return SyncOption()
        if word in ("JUST", "JUSTIFIED"):
            self.accept("RIGHT")
            return JustOption()
        if word == "BLANK":
            self.accept("WHEN")
            self.expect("ZERO", "ZEROS", "ZEROES")
            return BlankOption()
        if word in ("VALUE", "VALUES"):
            self.accept("IS", "ARE")
            return self.parse_value()
        return self.parse_usage(word)

    def parse_usage(self, word: str) -> Option:
        comp = COMP_RE.match(word)
        if comp:
            return CompUsage(level=comp.group(1) or "0")
        if word == "BINARY":
            return BinaryUsage()
        if word == "PACKED-DECIMAL":
            return PackedDecimalUsage()
        if word == "DISPLAY":
            return DisplayUsage()
        if word == "INDEX":
            return IndexUsage()
        raise CopybookSyntaxError(f"Unexpected token {word!r}", self.text)

    def parse_operand(self) -> IntValue | Identifier:
        token = self.next("occurs operand")
        if INT_RE.match(token):
            return IntValue(value=token)
        return Identifier(name=token)

    def parse_occurs(self) -> OccursOption:
        option = OccursOption(amount=self.parse_operand())
        if self.accept("TO"):
            option.upper_bound = self.parse_operand()
        self.accept("TIMES")
        if self.accept("DEPENDING"):
            self.accept("ON")
            option.depends_on = self.next("depending item")
        while self.accept("ASCENDING", "DESCENDING"):
            self.accept("KEY")
            self.accept("IS")
            option.keys.extend(self.names())
        if self.accept("INDEXED"):
            self.accept("BY")
            option.indexes.extend(self.names())
        return option

    def parse_value(self) -> Option:
        token = self.next("value literal")
        upper = token.upper()
        if token[0] in "\"'":
            return StringValue(value=token[1:-1])
        if INT_RE.match(token):
            return IntValue(value=token)
        if FLOAT_RE.match(token):
            return FloatValue(value=token)
        if upper in FIGURATIVE_VALUES:
            return FIGURATIVE_VALUES[upper]()
        if upper == "ALL":
            literal = self.next("literal")
            return AllStringValue(value=literal.strip("\"'"))
        return VariableValue(name=token)


def parse_picture(picture: str) -> Option:
    match = PICTURE_FORMAT_RE.match(picture.upper())
    if not match:
        return PictureStringOption(picture=picture)
    run = match.group("run")
    decimal_digits = match.group("ddigits")
    if decimal_digits is None and match.group("drun"):
        decimal_digits = str(len(match.group("drun")))
    return PictureFormatOption(
        type=(match.group("sign") or "") + run[0],
        digits=match.group("digits") or str(len(run)),
        decimal_type=match.group("decimal"),
        decimal_digits=decimal_digits,
    )


def parse_copybook(text: str) -> list[Record]:
    return [_EntryParser(tokens).parse() for tokens in iter_entries(text)]
