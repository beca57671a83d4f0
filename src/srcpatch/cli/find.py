from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from srcpatch.core.module import find_working_module
from srcpatch.core.package import Package
from srcpatch.errors import NotFoundError, SrcPatchError
from srcpatch.fs import DirFS

console = Console()


def find_type(
    name: Annotated[str, typer.Argument(help="Type name, or with --loose a file-name spelling of it.")],
    package: Annotated[str, typer.Option("--package", "-p", help="Package directory, relative to the working directory.")] = ".",
    loose: Annotated[bool, typer.Option(help="Also match other cases and file-name spellings.")] = False,
) -> None:
    """Show where a type is declared."""
    try:
        module = find_working_module(package)
        fs = DirFS(module.root)
        pkg = Package(fs, fs, module.module_path, module.package_dir)
        info = pkg.find_type_loose(name) if loose else pkg.find_type(name)
    except NotFoundError as err:
        console.print(f"[yellow]Type {escape(str(err))}[/yellow]")
        raise typer.Exit(1) from err
    except (SrcPatchError, OSError) as err:
        console.print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(1) from err

    console.print(f"[green]{info.name}[/green] declared in {info.filename}:{info.position.row + 1}")
    console.print(Syntax(info.node_source().decode("utf-8"), "go"))
