from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from srcpatch.core.diff import diff_layers
from srcpatch.core.module import find_working_module
from srcpatch.core.package import Package
from srcpatch.core.snippet import parse_transforms
from srcpatch.errors import SrcPatchError
from srcpatch.fs import DirFS, MemoryFS
from srcpatch.models import DedupImportsTransform, FormatTransform, Transform, TransformListAdapter

console = Console()


def _default_target(snippet: Path) -> str:
    return snippet.name.split(".", 1)[0] + ".go"


def _load_transforms(path: Path, target: str, replace: bool) -> list[Transform]:
    if path.suffix == ".json":
        return TransformListAdapter.validate_json(path.read_bytes())
    parsed = parse_transforms(target, path.read_text(encoding="utf-8"))
    if replace:
        parsed = [t.model_copy(update={"replace": True}) if "replace" in type(t).model_fields else t for t in parsed]
    return parsed


def apply(
    sources: Annotated[
        list[Path],
        typer.Argument(
            help="Snippet files (Go source without a package clause) or JSON transform lists.",
            exists=True,
            dir_okay=False,
        ),
    ],
    package: Annotated[str, typer.Option("--package", "-p", help="Package directory, relative to the working directory.")] = ".",
    file: Annotated[
        str | None, typer.Option(help="File inside the package to write to. Defaults to the snippet name + .go")
    ] = None,
    replace: Annotated[bool, typer.Option(help="Replace declarations that already exist.")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print a diff instead of writing files.")] = False,
    no_fmt: Annotated[bool, typer.Option("--no-fmt", help="Do not run the formatter on touched files.")] = False,
) -> None:
    """Apply snippets to a Go package."""
    try:
        module = find_working_module(package)
        input_fs = DirFS(module.root)
        output_fs: DirFS | MemoryFS = input_fs
        if dry_run:
            output_fs = MemoryFS()
            output_fs.makedirs(module.package_dir)
        pkg = Package(input_fs, output_fs, module.module_path, module.package_dir)

        trs: list[Transform] = []
        for source in sources:
            trs.extend(_load_transforms(source, file or _default_target(source), replace))
        touched = list(dict.fromkeys(t.filename for t in trs if hasattr(t, "filename")))
        trs.append(DedupImportsTransform(filename_list=touched))
        if not no_fmt:
            trs.append(FormatTransform(filename_list=touched))

        pkg.apply_transforms(*trs)
    except (SrcPatchError, ValidationError, OSError) as err:
        console.print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(1) from err

    console.print(f"[green]Applied[/green] {len(trs)} transform(s) to {module.package_dir}")
    if dry_run:
        diffs = diff_layers(input_fs, output_fs, [module.package_dir])
        if not diffs:
            console.print("No changes.")
        for path in sorted(diffs):
            console.print(f"### {path}")
            console.print(Syntax(diffs[path], "diff"))


def transforms(
    snippet: Annotated[Path, typer.Argument(help="Snippet file to decompose.", exists=True, dir_okay=False)],
    file: Annotated[str | None, typer.Option(help="Target file name recorded in the transforms.")] = None,
) -> None:
    """Print the transforms a snippet decomposes into, as JSON."""
    try:
        trs = parse_transforms(file or _default_target(snippet), snippet.read_text(encoding="utf-8"))
    except (SrcPatchError, OSError) as err:
        console.print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(1) from err
    typer.echo(TransformListAdapter.dump_json(trs, indent=2).decode("utf-8"))
