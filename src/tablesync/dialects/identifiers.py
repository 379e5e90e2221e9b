"""
SQL identifier validation.

Identifiers are validated before any dialect quotes them, so table and
column names can never smuggle SQL into a rendered statement.
"""

import re

# Strict ASCII-only patterns for SQL identifiers
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
VALID_SCHEMA_TABLE = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$"
)


def validate_identifier(identifier: str) -> None:
    """
    Validate a column name.

    Raises:
        ValueError: If the identifier contains invalid characters
    """
    if not identifier:
        raise ValueError("SQL identifier cannot be empty")

    if not VALID_IDENTIFIER.match(identifier):
        raise ValueError(
            f"Invalid SQL identifier: {identifier!r}. "
            "Only ASCII letters, digits, and underscores are allowed, "
            "and must start with a letter or underscore."
        )


def validate_schema_table(schema_table: str) -> None:
    """
    Validate a ``table`` or ``schema.table`` identifier.

    Raises:
        ValueError: If the identifier format is invalid
    """
    if not schema_table:
        raise ValueError("Schema.table identifier cannot be empty")

    if not VALID_SCHEMA_TABLE.match(schema_table):
        raise ValueError(
            f"Invalid schema.table identifier: {schema_table!r}. "
            "Only ASCII letters, digits, and underscores are allowed."
        )


def split_schema_table(schema_table: str) -> list[str]:
    validate_schema_table(schema_table)
    return schema_table.split(".")


def validate_integer_param(value: int, param_name: str, min_value: int = 0) -> None:
    """
    Validate an integer setting such as a batch size.

    Raises:
        ValueError: If the value is not an integer or below minimum
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Invalid {param_name}: {value!r}. Must be an integer.")

    if value < min_value:
        raise ValueError(f"Invalid {param_name}: {value}. Must be >= {min_value}.")
