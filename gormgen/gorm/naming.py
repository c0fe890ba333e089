"""Identifier conversion for generated Go code.

Column and table names arrive in snake_case; Go wants exported
PascalCase identifiers with initialisms in upper case (``UserID``,
``HTTPStatus``).
"""

import re
from types import MappingProxyType
from typing import Mapping

GO_FILE_EXTENSION = ".go"

# Title-cased form -> Go initialism
ACRONYMS: Mapping[str, str] = MappingProxyType({
    "Id": "ID",
    "Url": "URL",
    "Api": "API",
    "Http": "HTTP",
    "Json": "JSON",
    "Xml": "XML",
    "Sql": "SQL",
    "Uuid": "UUID",
    "Ip": "IP",
    "Html": "HTML",
    "Css": "CSS",
    "Db": "DB",
})

IRREGULAR_PLURALS: Mapping[str, str] = MappingProxyType({
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "teeth": "tooth",
    "feet": "foot",
    "mice": "mouse",
    "geese": "goose",
})

_WORD_SEPARATORS = "_ -."


def to_pascal_case(name: str) -> str:
    """Convert ``user_account`` style names to ``UserAccount``.

    Words are split the way ``to_snake_case`` splits them, so capital runs
    keep their boundaries (``APIKey`` -> ``ApiKey``, ``HTTP_code`` ->
    ``HttpCode``) and acronym handling can re-apply them consistently.
    Letters after a separator or a digit are capitalized. Characters other
    than ASCII letters and digits are dropped.
    """
    result = []
    cap_next = True
    for ch in to_snake_case(name):
        if "a" <= ch <= "z":
            result.append(ch.upper() if cap_next else ch)
            cap_next = False
        elif "0" <= ch <= "9":
            result.append(ch)
            cap_next = True
        else:
            cap_next = ch in _WORD_SEPARATORS
    return "".join(result)


def to_snake_case(name: str) -> str:
    """Convert ``UserAccounts`` or ``user-accounts`` to ``user_accounts``."""
    s = name.strip()
    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", s)
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s)
    s = re.sub(r"[\s\-.]+", "_", s)
    s = re.sub(r"_+", "_", s)
    return s.lower()


def handle_acronyms(name: str) -> str:
    """Upper-case known initialisms that form a complete word.

    A word ends at the end of the string or where the next capital letter
    starts. Applying this twice gives the same result as applying it once.
    """
    for pattern, replacement in ACRONYMS.items():
        name = _replace_acronym(name, pattern, replacement)
    return name


def _replace_acronym(name: str, pattern: str, replacement: str) -> str:
    size = len(pattern)
    i = 0
    while i <= len(name) - size:
        if name[i:i + size] == pattern:
            end = i + size
            if end >= len(name) or name[end].isupper():
                name = name[:i] + replacement + name[end:]
                i += len(replacement)
                continue
        i += 1
    return name


def singularize(word: str) -> str:
    """Convert a plural table name to singular.

    Irregular nouns are looked up on the last ``_``-separated segment, then
    suffix rules apply to the whole word.
    """
    if not word:
        return word

    head, sep, last = word.rpartition("_")
    irregular = IRREGULAR_PLURALS.get(last.lower())
    if irregular is not None:
        return head + sep + irregular

    lower = word.lower()
    if len(word) > 3:
        if lower.endswith("ies"):
            return word[:-3] + "y"
        if lower.endswith("ves"):
            return word[:-3] + "f"
        if lower.endswith("oes"):
            return word[:-2]

    if len(word) > 2:
        if lower.endswith("es"):
            base = lower[:-2]
            if base.endswith(("s", "x", "z", "ch", "sh")):
                return word[:-2]
            return word[:-1]
        if lower.endswith("ss"):
            return word
        if lower.endswith("s"):
            return word[:-1]

    return word


def to_field_name(column_name: str) -> str:
    """Column name -> exported Go field name (``user_id`` -> ``UserID``)."""
    return handle_acronyms(to_pascal_case(column_name))


def to_struct_name(table_name: str) -> str:
    """Table name -> singular exported Go type name (``users`` -> ``User``)."""
    return handle_acronyms(to_pascal_case(singularize(table_name)))


def to_file_name(table_name: str) -> str:
    """Table name -> generated file name (``UserAccounts`` -> ``user_accounts.go``)."""
    return to_snake_case(table_name) + GO_FILE_EXTENSION
