from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


class _Transform(BaseModel):
    model_config = ConfigDict(frozen=True)


class ImportTransform(_Transform):
    """Ensures a package is imported, optionally under a local name ("_" and "." included)."""

    kind: Literal["import"] = "import"
    filename: str
    name: str = ""
    path: str


class AddFuncTransform(_Transform):
    """Adds a function or method; ``receiver_type`` is "", "T" or "*T"."""

    kind: Literal["add_func"] = "add_func"
    filename: str
    name: str
    receiver_type: str = ""
    text: str
    replace: bool = False


class AddConstTransform(_Transform):
    kind: Literal["add_const"] = "add_const"
    filename: str
    name_list: list[str]
    text: str
    replace: bool = False


class AddVarTransform(_Transform):
    kind: Literal["add_var"] = "add_var"
    filename: str
    name_list: list[str]
    text: str
    replace: bool = False


class AddTypeTransform(_Transform):
    kind: Literal["add_type"] = "add_type"
    filename: str
    name: str
    text: str
    replace: bool = False


class DedupImportsTransform(_Transform):
    """Removes duplicate import specs; ``filename_list=None`` selects every file."""

    kind: Literal["dedup_imports"] = "dedup_imports"
    filename_list: list[str] | None = None


class FormatTransform(_Transform):
    """Runs the external formatter; ``filename_list=None`` selects every file."""

    kind: Literal["format"] = "format"
    filename_list: list[str] | None = None


Transform = Annotated[
    ImportTransform
    | AddFuncTransform
    | AddConstTransform
    | AddVarTransform
    | AddTypeTransform
    | DedupImportsTransform
    | FormatTransform,
    Field(discriminator="kind"),
]

TransformListAdapter: TypeAdapter[list[Transform]] = TypeAdapter(list[Transform])
