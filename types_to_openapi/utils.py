"""
Utility functions for type naming and de-duplication.
"""

import hashlib
import re

# Quoted module prefixes ('"pkg.module".') and spaces are noise in type names
_NAME_NOISE_PATTERN = re.compile(r'(\bimport\(".*?"\)|".*?")\.| ')

# Names that can be used verbatim as reference keys
_REFFABLE_NAME_PATTERN = re.compile(r"^[0-9A-Za-z._]+$")


def strip_name_noise(name: str) -> str:
    """Remove quoted module prefixes and whitespace from a type name.

    Examples:
        '"app.models".Book' -> "Book"
        "Response[Book, int]" -> "Response[Book,int]"
    """
    return _NAME_NOISE_PATTERN.sub("", name)


def is_reffable_name(name: str) -> bool:
    """Check whether a name is a plain dotted identifier.

    Generic instantiations such as ``Response[Book]`` are not.
    """
    return bool(_REFFABLE_NAME_PATTERN.match(name))


def unique(values: list[str]) -> list[str]:
    """De-duplicate values, keeping first-seen order."""
    return list(dict.fromkeys(values))


def hash_of_declaration(relative_path: str, position: int) -> str:
    """Short deterministic hash of a declaration's file and position."""
    digest = hashlib.md5()
    digest.update(relative_path.encode("utf-8"))
    digest.update(str(position).encode("utf-8"))
    return digest.hexdigest()[:8]
