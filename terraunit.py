#!/usr/bin/env python
import logging
import shutil
import sys
from typing import List, Optional

import click

import deployunit.config_loader as config_loader
import deployunit.drawing as drawing
import deployunit.fileparser as fileparser
import deployunit.renderer as renderer
from deployunit.exceptions import TerraUnitError, ValidationError
from deployunit.models import Translation
from deployunit.translators import get_translator, translate_environment
from deployunit.utils.graph_utils import build_graphdict


__version__ = "0.3"

SOURCE_SUFFIXES = (".yml", ".yaml", ".json", ".tfvars", ".hcl")
OUTPUT_FORMATS = ("tf-json", "declarations")


def my_excepthook(exc_type, exc_value, exc_traceback):
    print(f"Unhandled error: {exc_type}, {exc_value}, {exc_traceback}")


def _show_banner():
    banner = (
        "\n"
        " _                                     _ _   \n"
        "| |_ ___ _ __ _ __ __ _ _   _ _ __  (_) |_ \n"
        "| __/ _ \\ '__| '__/ _` | | | | '_ \\ | | __|\n"
        "| ||  __/ |  | | | (_| | |_| | | | || | |_ \n"
        " \\__\\___|_|  |_|  \\__,_|\\__,_|_| |_||_|\\__|\n"
        "\n"
    )
    click.echo(banner, err=True)


def _error(message: str) -> None:
    click.echo(click.style(f"\nERROR: {message}\n", fg="red", bold=True), err=True)


def _setup(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not debug:
        sys.excepthook = my_excepthook


def _validate_source(source: str) -> None:
    if not source.lower().endswith(SOURCE_SUFFIXES):
        _error(
            f"Unsupported unit file '{source}'. Pass a YAML, JSON or .tfvars file."
        )
        sys.exit(1)


def compile_translations(
    source: str, provider: Optional[str], strict: bool
) -> List[Translation]:
    """Load units from a file and translate them all.

    Args:
        source: Path to the unit file
        provider: Provider overriding the one named in the file
        strict: Reject unrecognised module options

    Returns:
        list: One Translation per unit, in file order
    """
    _validate_source(source)
    units = fileparser.load_units(source, provider=provider, strict=strict)
    click.echo(f"  Loaded {len(units)} unit(s) from {source}", err=True)
    return translate_environment(units)


def _write_output(text: str, outfile: Optional[str]) -> None:
    if outfile:
        with open(outfile, "w") as f:
            f.write(text)
        click.echo(f"\nExported output into file {outfile}", err=True)
    else:
        click.echo(text, nl=False)


def _run(debug: bool, action, *args):
    try:
        return action(*args)
    except TerraUnitError as e:
        if debug:
            raise
        _error(str(e))
        sys.exit(1)


@click.version_option(version=__version__, prog_name="terraunit")
@click.group()
def cli():
    """
    terraunit lowers provider-agnostic deployment units into Terraform resource declarations

    For help with a specific command type:

    terraunit [COMMAND] --help

    """
    pass


def _source_options(func):
    func = click.option(
        "--strict",
        is_flag=True,
        default=False,
        help="Reject unrecognised module options",
    )(func)
    func = click.option(
        "--provider",
        type=click.Choice(list(config_loader.PROVIDER_CONFIG_MODULES), case_sensitive=False),
        default=None,
        help="Target provider, overriding the one in the unit file",
    )(func)
    func = click.option(
        "--source",
        required=True,
        help="Unit file (YAML, JSON or .tfvars)",
    )(func)
    func = click.option(
        "--debug", is_flag=True, default=False, help="Dump exception tracebacks"
    )(func)
    return func


@cli.command()
@_source_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="tf-json",
    help="Terraform JSON document or ordered declaration list",
)
@click.option("--outfile", default=None, help="Write output to file instead of stdout")
def translate(debug, source, provider, strict, output_format, outfile):
    """Translates Deployment Units into Resource Declarations"""
    _setup(debug)
    _show_banner()
    translations = _run(debug, compile_translations, source, provider, strict)
    if output_format == "tf-json":
        document = renderer.render_terraform_json(translations)
    else:
        document = renderer.render_declarations(translations)
    _write_output(renderer.dumps(document), outfile)


@cli.command()
@_source_options
def validate(debug, source, provider, strict):
    """Validates Deployment Units without translating them"""
    _setup(debug)
    _validate_source(source)
    units = _run(debug, fileparser.load_units, source, provider, strict)

    failures = 0
    for unit in units:
        try:
            get_translator(unit.provider).validate(unit)
        except ValidationError as e:
            failures += 1
            click.echo(click.style(f"  {unit.name}: invalid", fg="red", bold=True))
            for field, message in e.errors:
                click.echo(f"    {field}: {message}")
        except TerraUnitError as e:
            failures += 1
            click.echo(click.style(f"  {unit.name}: {e}", fg="red", bold=True))
        else:
            click.echo(click.style(f"  {unit.name}: ok ({unit.provider})", fg="green"))

    if failures:
        sys.exit(1)


@cli.command()
@_source_options
@click.option(
    "--outfile",
    default="graphdata",
    help="Filename for output dependency dictionary (default graphdata.json)",
)
def graphdata(debug, source, provider, strict, outfile):
    """List Resource Declarations and their References as JSON"""
    _setup(debug)
    _show_banner()
    translations = _run(debug, compile_translations, source, provider, strict)
    graphdict = {}
    for translation in translations:
        graphdict.update(build_graphdict(translation.declarations))
    if not outfile.endswith(".json"):
        outfile += ".json"
    _write_output(renderer.dumps(graphdict), outfile)


@cli.command()
@_source_options
@click.option(
    "--outfile",
    default="architecture",
    help="Filename for output diagram (default architecture.png)",
)
@click.option("--format", default="png", help="File format (png/pdf/svg/dot)")
def draw(debug, source, provider, strict, outfile, format):
    """Draws the Declaration Dependency Graph"""
    _setup(debug)
    _show_banner()
    if not shutil.which("dot"):
        _error(
            "dot command executable not detected in path. Please install Graphviz first"
        )
        sys.exit(1)
    translations = _run(debug, compile_translations, source, provider, strict)
    graphdict = {}
    for translation in translations:
        graphdict.update(build_graphdict(translation.declarations))
    drawing.render_graph(graphdict, outfile, format)


@cli.command()
def providers():
    """Lists Supported Providers and the Resource Types they lower to"""
    for provider in config_loader.list_available_providers():
        cfg = config_loader.load_config(provider)
        click.echo(
            click.style(f"{provider} ({cfg.PROVIDER_NAME})", fg="white", bold=True)
        )
        for resource_type in cfg.RESOURCE_TYPES:
            click.echo(f"  {resource_type}")


if __name__ == "__main__":
    cli()
