"""
Recursive-descent parser for the SQL-like statement language.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import QuerySyntaxError
from .tokenizer import tokenize
from .types import INT32_MAX, INT32_MIN, Integer, Text, Value


class QueryType(Enum):
    """Types of statements we support."""
    CREATE_TABLE = "CREATE_TABLE"
    INSERT = "INSERT"
    SELECT = "SELECT"


@dataclass(frozen=True)
class ColumnDefinition:
    name: str
    data_type: str
    is_primary: bool = False
    is_unique: bool = False


@dataclass(frozen=True)
class JoinClause:
    table_name: str
    left_column: str
    right_column: str


@dataclass(frozen=True)
class CreateTable:
    name: str
    columns: List[ColumnDefinition] = field(default_factory=list)

    type = QueryType.CREATE_TABLE
    is_mutation = True


@dataclass(frozen=True)
class Insert:
    table_name: str
    values: List[Value] = field(default_factory=list)

    type = QueryType.INSERT
    is_mutation = True


@dataclass(frozen=True)
class Select:
    table_name: str
    columns: List[str] = field(default_factory=list)
    join: Optional[JoinClause] = None

    type = QueryType.SELECT
    is_mutation = False


class TokenStream:
    """Forward-only cursor over a token list with one token of lookahead."""

    def __init__(self, tokens: List[str]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def next(self) -> Optional[str]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def expect(self, message: str) -> str:
        """Consume the next token, failing with ``message`` at end of input."""
        token = self.next()
        if token is None:
            raise QuerySyntaxError(message)
        return token

    def expect_keyword(self, keyword: str, message: str) -> None:
        token = self.next()
        if token is None or token.upper() != keyword:
            raise QuerySyntaxError(message)

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)


class QueryParser:
    """Parses statement text into typed statements.

    With ``strict_join`` the optional join clause must literally read
    ``JOIN <table> ON <left> = <right>``. Otherwise any token after the
    table name starts a join and the ON / ``=`` positions are skipped
    without inspection.
    """

    INTEGER_PATTERN = re.compile(r'^[+-]?[0-9]+$')

    def __init__(self, strict_join: bool = False):
        self.strict_join = strict_join

    def parse(self, query: str):
        """Parse a SQL-like statement into a CreateTable, Insert or Select."""
        tokens = tokenize(query.strip().rstrip(';'))
        if not tokens:
            raise QuerySyntaxError("Empty query")

        stream = TokenStream(tokens)
        command = stream.next()

        if command.upper() == "CREATE":
            return self._parse_create_table(stream)
        elif command.upper() == "INSERT":
            return self._parse_insert(stream)
        elif command.upper() == "SELECT":
            return self._parse_select(stream)
        else:
            raise QuerySyntaxError(f"Unknown command: {command}")

    def _parse_create_table(self, stream: TokenStream) -> CreateTable:
        """Parse CREATE TABLE name ( col TYPE [PRIMARY] [UNIQUE], ... )."""
        stream.expect_keyword("TABLE", "Expected TABLE after CREATE")
        name = stream.expect("Expected table name")
        if stream.next() != "(":
            raise QuerySyntaxError("Expected '('")

        columns = []
        while not stream.at_end():
            token = stream.next()
            if token == ")":
                break
            if token == ",":
                continue

            data_type = stream.next()
            if data_type is None or data_type in (",", ")"):
                raise QuerySyntaxError("Expected column type")

            is_primary = False
            is_unique = False
            # Unknown modifiers are skipped up to the next delimiter.
            while stream.peek() is not None and stream.peek() not in (",", ")"):
                modifier = stream.next().upper()
                if modifier == "PRIMARY":
                    is_primary = True
                elif modifier == "UNIQUE":
                    is_unique = True

            columns.append(ColumnDefinition(
                name=token,
                data_type=data_type.upper(),
                is_primary=is_primary,
                is_unique=is_unique,
            ))

        return CreateTable(name=name, columns=columns)

    def _parse_insert(self, stream: TokenStream) -> Insert:
        """Parse INSERT INTO name VALUES ( v, ... )."""
        stream.expect_keyword("INTO", "Expected INTO after INSERT")
        name = stream.expect("Expected table name")
        stream.expect_keyword("VALUES", "Expected VALUES after table name")
        if stream.next() != "(":
            raise QuerySyntaxError("Expected '('")

        values = []
        while not stream.at_end():
            token = stream.next()
            if token == ")":
                break
            if token == ",":
                continue
            values.append(self._parse_value(token))

        return Insert(table_name=name, values=values)

    def _parse_select(self, stream: TokenStream) -> Select:
        """Parse SELECT cols FROM table [JOIN other ON left = right]."""
        columns = []
        while True:
            token = stream.next()
            if token is None:
                raise QuerySyntaxError("Expected FROM")
            if token.upper() == "FROM":
                break
            if token != ",":
                columns.append(token)

        table_name = stream.expect("Expected table name")

        join = None
        if not stream.at_end():
            join = self._parse_join(stream)

        return Select(table_name=table_name, columns=columns, join=join)

    def _parse_join(self, stream: TokenStream) -> JoinClause:
        if self.strict_join:
            stream.expect_keyword("JOIN", "Expected JOIN")
        else:
            stream.next()
        join_table = stream.expect("Expected join table")

        if self.strict_join:
            stream.expect_keyword("ON", "Expected ON")
        else:
            stream.next()
        left = stream.expect("Expected left column")

        if self.strict_join:
            stream.expect_keyword("=", "Expected '='")
        else:
            stream.next()
        right = stream.expect("Expected right column")

        if self.strict_join and not stream.at_end():
            raise QuerySyntaxError(f"Unexpected token: {stream.peek()}")

        return JoinClause(table_name=join_table, left_column=left, right_column=right)

    def _parse_value(self, token: str) -> Value:
        """Integers become Integer; anything else is Text, one pair of quotes stripped."""
        if self.INTEGER_PATTERN.match(token):
            number = int(token)
            if INT32_MIN <= number <= INT32_MAX:
                return Integer(number)
        if len(token) >= 2 and token.startswith("'") and token.endswith("'"):
            token = token[1:-1]
        return Text(token)
