"""Serialize a class model as a text listing, Graphviz dot, or JSON."""

from __future__ import annotations

from typing import Any

import orjson

from cobmap.config import MapperConfig
from cobmap.model import Association, Class, Model, Property


def _node_id(name: str) -> str:
    return name.replace("-", "_")


def _property_label(prop: Property) -> str:
    return f"{prop.name} : {'signed ' if prop.signed else ''}{prop.type}"


def _association_text(association: Association) -> str:
    line = f"  -> {association.target or ''}"
    if association.multiplicity is not None:
        line += f"[{association.multiplicity}]"
        if association.depends_on is not None:
            line += f"({association.depends_on})"
    return line


def render_class_text(klass: Class) -> str:
    lines = [f"- {klass.name}" + (f" : {klass.superclass}" if klass.superclass else "")]
    lines.extend(f"  - {_property_label(prop)}" for prop in klass.properties)
    lines.extend(_association_text(association) for association in klass.associations)
    return "\n".join(lines)


def render_text(model: Model) -> str:
    """One block per class: header, properties, then associations."""
    return "\n".join(render_class_text(klass) for klass in model.classes)


def render_dot(model: Model, config: MapperConfig | None = None) -> str:
    """Graphviz digraph with association edges and generalization edges."""
    cfg = config or MapperConfig()
    lines = [
        f"digraph {cfg.graph_name} {{",
        "  node [",
        f'    fontname = "{cfg.font_name}"',
        f"    fontsize = {cfg.node_font_size}",
        '    shape    = "record"',
        "  ]",
        "",
        "  edge [",
        f'    fontname  = "{cfg.font_name}"',
        f"    fontsize  = {cfg.edge_font_size}",
        '    arrowhead = "vee"',
        "  ]",
        "",
    ]
    for klass in model.classes:
        label = "".join(f"+ {_property_label(prop)}\\l" for prop in klass.properties)
        lines.append(f"  {_node_id(klass.name)} [")
        lines.append(f'    label = "{{{klass.name}|{label}}}"')
        lines.append("  ]")
        for association in klass.associations:
            if association.target is None:
                continue
            lines.append(
                f"  {_node_id(association.source.name)} -> {_node_id(association.target)}"
            )
        lines.append("")
    lines.append("  edge [ arrowhead = empty ]")
    for klass in model.classes:
        if klass.superclass is not None:
            lines.append(f"  {_node_id(klass.name)} -> {_node_id(klass.superclass)}")
    lines.append("}")
    return "\n".join(lines) + "\n"


def model_to_dict(model: Model) -> dict[str, Any]:
    return {
        "classes": [
            {
                "name": klass.name,
                "superclass": klass.superclass,
                "properties": [
                    {"name": prop.name, "type": prop.type, "signed": prop.signed}
                    for prop in klass.properties
                ],
                "associations": [
                    {
                        "target": association.target,
                        "multiplicity": association.multiplicity,
                        "depends_on": association.depends_on,
                    }
                    for association in klass.associations
                ],
            }
            for klass in model.classes
        ]
    }


def render_json(model: Model) -> str:
    return orjson.dumps(model_to_dict(model), option=orjson.OPT_INDENT_2).decode()


def render(model: Model, config: MapperConfig | None = None) -> str:
    cfg = config or MapperConfig()
    if cfg.format == "dot":
        return render_dot(model, cfg)
    if cfg.format == "json":
        return render_json(model)
    return render_text(model)
