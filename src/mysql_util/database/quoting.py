"""
Identifier quoting and LIKE pattern escaping for MySQL statements
"""


def quote_identifier(name: str) -> str:
    """Quote a MySQL identifier with backticks."""
    return "`" + name.replace("`", "``") + "`"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the pattern matches the value literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
