"""Graph utilities for declaration dependency processing.

Declarations reference each other through Reference objects. These helpers
build the adjacency dictionary (graphdict) of those references and order
declarations so dependencies always come before dependents.
"""

from typing import Dict, List, Sequence

from deployunit.exceptions import TranslationError
from deployunit.models import Declaration


def build_graphdict(declarations: Sequence[Declaration]) -> Dict[str, List[str]]:
    """Map each declaration address to the addresses it references.

    Args:
        declarations: Declarations to inspect

    Returns:
        dict: {address: [referenced addresses]} preserving declaration order
    """
    return {
        declaration.address: declaration.references() for declaration in declarations
    }


def unresolved_references(declarations: Sequence[Declaration]) -> List[str]:
    """List references that point at addresses not present in the sequence.

    Returns:
        list: Sorted "source -> target" strings, empty when all references resolve
    """
    known = {declaration.address for declaration in declarations}
    dangling = []
    for declaration in declarations:
        for target in declaration.references():
            if target not in known:
                dangling.append(f"{declaration.address} -> {target}")
    return sorted(dangling)


def order_declarations(declarations: Sequence[Declaration]) -> List[Declaration]:
    """Order declarations so every reference resolves to an earlier entry.

    The sort is stable: among declarations whose dependencies are satisfied,
    the one emitted first by the translator is placed first, so an already
    ordered sequence is returned unchanged.

    Args:
        declarations: Declarations in emission order

    Returns:
        list: Declarations in dependency order

    Raises:
        TranslationError: On duplicate addresses, dangling references or cycles
    """
    by_address: Dict[str, Declaration] = {}
    for declaration in declarations:
        if declaration.address in by_address:
            raise TranslationError(
                "Duplicate declaration address",
                context={"address": declaration.address},
            )
        by_address[declaration.address] = declaration

    dangling = unresolved_references(declarations)
    if dangling:
        raise TranslationError(
            "Declarations reference undeclared addresses",
            context={"references": "; ".join(dangling)},
        )

    graphdict = build_graphdict(declarations)
    placed: List[str] = []
    remaining = [declaration.address for declaration in declarations]
    while remaining:
        for address in remaining:
            if all(dep in placed for dep in graphdict[address]):
                placed.append(address)
                remaining.remove(address)
                break
        else:
            raise TranslationError(
                "Circular references between declarations",
                context={"addresses": ", ".join(remaining)},
            )

    return [by_address[address] for address in placed]
