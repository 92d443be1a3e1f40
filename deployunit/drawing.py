"""Dependency graph drawing for terraunit.

Renders the declaration graphdict with Graphviz. Edges point from a
declaration to the declarations that depend on it, i.e. in creation order.
"""

from typing import Dict, List, Optional

import click
import graphviz

# Fill colours per Terraform resource prefix
PROVIDER_COLOURS = {
    "aws_": "#FF9900",
    "google_": "#4285F4",
    "azurerm_": "#0078D4",
}
DEFAULT_COLOUR = "#DDDDDD"


def node_colour(address: str) -> str:
    for prefix, colour in PROVIDER_COLOURS.items():
        if address.startswith(prefix):
            return colour
    return DEFAULT_COLOUR


def make_digraph(
    graphdict: Dict[str, List[str]], title: str = "terraunit"
) -> graphviz.Digraph:
    """Build a Digraph from {address: [referenced addresses]}.

    Args:
        graphdict: Dependency dictionary as built by build_graphdict
        title: Graph label

    Returns:
        graphviz.Digraph ready to render
    """
    dot = graphviz.Digraph(name="terraunit", comment=title)
    dot.attr(rankdir="LR", label=title, labelloc="t", fontsize="18")
    dot.attr("node", shape="box", style="rounded,filled", fontname="Helvetica")

    for address in graphdict:
        resource_type, _, name = address.partition(".")
        dot.node(
            address,
            label=f"{resource_type}\n{name}",
            fillcolor=node_colour(address),
        )
    for address, dependencies in graphdict.items():
        for dependency in dependencies:
            dot.edge(dependency, address)
    return dot


def render_graph(
    graphdict: Dict[str, List[str]],
    outfile: str = "architecture",
    format: str = "png",
    title: Optional[str] = None,
) -> str:
    """Render the dependency graph to a file.

    Args:
        graphdict: Dependency dictionary
        outfile: Output filename without extension
        format: Output format (png, svg, pdf, dot)

    Returns:
        Path of the rendered file
    """
    dot = make_digraph(graphdict, title or outfile)
    click.echo(click.style("\nRendering dependency graph...", fg="white", bold=True))
    path = dot.render(filename=outfile, format=format, cleanup=True)
    click.echo(f"  Output file: {path}")
    return path
