"""Query string decomposition.

A key sent once maps to its string value; a repeated key maps to the
ordered list of every value it was sent with.
"""

from typing import TypeAlias
from urllib.parse import parse_qsl

QueryValue: TypeAlias = str | list[str]


def parse_query(query_string: bytes | str) -> dict[str, QueryValue]:
    """Decompose *query_string* into a key → scalar-or-list mapping.

    Examples::

        parse_query(b"page=1")          -> {"page": "1"}
        parse_query(b"tag=a&tag=b")     -> {"tag": ["a", "b"]}
        parse_query(b"q=hello%20world") -> {"q": "hello world"}
    """
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")

    collected: dict[str, list[str]] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        collected.setdefault(key, []).append(value)

    return {key: values[0] if len(values) == 1 else values for key, values in collected.items()}
