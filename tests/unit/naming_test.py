from __future__ import annotations

import pytest

from srcpatch.core.naming import dir_has_suffix, dir_resolve_to, lower_for_type


@pytest.mark.parametrize(
    ("type_name", "sep", "expected"),
    [
        ("Something", "-", "something"),
        ("SomeThing", "-", "some-thing"),
        ("HTTPSomething", "-", "http-something"),
        ("YetAnotherThing", "_", "yet_another_thing"),
        ("ID", "-", "id"),
        ("lower", "-", "lower"),
    ],
)
def test_lower_for_type(type_name: str, sep: str, expected: str) -> None:
    assert lower_for_type(type_name, sep) == expected


def test_dir_has_suffix() -> None:
    assert dir_has_suffix("some/dir/here", "dir/here")
    assert dir_has_suffix("some/dir/here/", "here")
    assert not dir_has_suffix("some/dir/here", "there")


def test_dir_resolve_to() -> None:
    assert dir_resolve_to("some/dir/here", "here", "there") == "some/dir/there"
    assert dir_resolve_to("/abs/dir/here", "dir/here", "other") == "/abs/other"
    assert dir_resolve_to("some/dir/here", "dir/here", "../up") == "up"


def test_dir_resolve_to_requires_suffix() -> None:
    with pytest.raises(ValueError, match="does not end with"):
        dir_resolve_to("some/dir/here", "nope", "there")
