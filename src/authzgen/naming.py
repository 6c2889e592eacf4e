"""String helpers shared by the code generators."""

import keyword
import unicodedata


def upper_first(s: str) -> str:
    if not s:
        return s
    return s[0].upper() + s[1:]


def snake_to_pascal(s: str) -> str:
    """'snake_case_example' -> 'SnakeCaseExample'."""
    return "".join(upper_first(word) for word in s.split("_"))


def snake_to_camel(s: str) -> str:
    """'snake_case_example' -> 'snakeCaseExample'."""
    pascal = snake_to_pascal(s)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]


def package_name(s: str) -> str:
    """Strip '-' and '_' and lowercase: 'Hello-World_Test' -> 'helloworldtest'."""
    return s.replace("-", "").replace("_", "").lower()


def type_name(object_type: str) -> str:
    """Type name for a canonical object type path.

    Single segments use the segment itself; longer paths use the second
    segment, so 'platform/user' -> 'User' and 'namespace/platform/user'
    -> 'Platform'.
    """
    segments = object_type.split("/")
    if len(segments) == 1:
        return upper_first(package_name(segments[0]))
    return upper_first(package_name(segments[1]))


def quote(s: str) -> str:
    return '"' + s + '"'


def python_identifier(s: str) -> str:
    """Coerce s into a valid, non-keyword Python identifier."""
    # Python compares identifiers after NFKC, so normalize before checking
    s = unicodedata.normalize("NFKC", s)
    ident = "".join(ch if ("_" + ch).isidentifier() else "_" for ch in s)
    if not ident.isidentifier():
        ident = "_" + ident
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


def constant_name(*parts: str) -> str:
    """UPPER_SNAKE constant from name parts: ('user', 'relation', 'owner')."""
    return python_identifier("_".join(parts).upper())


def unique_names(names: list[str], taken: set[str] | None = None) -> list[str]:
    """Make names unique in order, suffixing repeats with _2, _3, ..."""
    seen = set(taken or ())
    result = []
    for name in names:
        candidate = name
        n = 2
        while candidate in seen:
            candidate = f"{name}_{n}"
            n += 1
        seen.add(candidate)
        result.append(candidate)
    return result
