import posixpath


def lower_for_type(type_name: str, sep: str) -> str:
    """Lower-case a type name, separating its words with *sep*.

    Useful for deriving file names from a type name: ``SomeThing`` becomes
    ``some-thing`` and ``HTTPSomething`` becomes ``http-something``. A run of
    capitals is one word, except for its last letter when a lower-case letter
    follows it.
    """
    out: list[str] = []
    last = ""
    for char in type_name:
        last_upper = last == "" or last.isupper()
        if not char.isupper() and last_upper and out:
            prior = out.pop()
            out.extend(sep)
            out.append(prior)
        out.append(char.lower())
        last = char
    return "".join(out).removeprefix(sep)


def dir_has_suffix(directory: str, suffix: str) -> bool:
    return posixpath.normpath(directory).endswith(posixpath.normpath(suffix))


def dir_resolve_to(directory: str, from_suffix: str, to_suffix: str) -> str:
    """Swap the trailing *from_suffix* of *directory* for *to_suffix*.

    ``dir_resolve_to("some/dir/here", "here", "there") == "some/dir/there"``
    """
    normalized = posixpath.normpath(directory)
    from_suffix = posixpath.normpath(from_suffix)
    to_suffix = posixpath.normpath(to_suffix)
    if not normalized.endswith(from_suffix):
        raise ValueError(f"dir {directory!r} does not end with suffix {from_suffix!r}")
    head = normalized[: len(normalized) - len(from_suffix)]
    resolved = posixpath.normpath(posixpath.join(head, to_suffix))
    if not directory.startswith("/"):
        resolved = resolved.removeprefix("/")
    return resolved
