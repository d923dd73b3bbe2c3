"""
descriptor.py

Responsibility: Load a skeleton's descriptor into a typed, immutable model.

The descriptor lives at a fixed location in the skeleton root. `config.xml`
is the classic format; `config.yaml` / `config.yml` are accepted too:

    <skeleton>
      <name>hello</name>
      <description>Says hello</description>
      <parameters>
        <param name="proj" description="Project name"/>
      </parameters>
    </skeleton>

    name: hello
    description: Says hello
    parameters:
      - name: proj
        description: Project name

Loading is conservative: a descriptor that exists but cannot be parsed yields
empty values rather than an error, and absent fields default to empty.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from skelgen.errors import DescriptorError, MissingDescriptorError

logger = logging.getLogger(__name__)

DESCRIPTOR_NAMES = ("config.xml", "config.yaml", "config.yml")


@dataclass(frozen=True)
class Parameter:
    """A declared substitution point: `${name}`, prompted with `description`."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class Descriptor:
    """Parsed descriptor contents."""

    name: str = ""
    description: str = ""
    parameters: tuple[Parameter, ...] = ()
    source: Path | None = field(default=None, compare=False)


def find_descriptor(root: str | Path) -> Path | None:
    root_path = Path(root)
    for name in DESCRIPTOR_NAMES:
        candidate = root_path / name
        if candidate.is_file():
            return candidate
    return None


def _text(node: ET.Element | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.strip()


def _parse_xml(data: bytes) -> tuple[str, str, list[dict[str, Any]]]:
    # Bytes, so the encoding declared in the XML prolog is honoured.
    root = ET.fromstring(data)
    params = [dict(p.attrib) for p in root.findall("./parameters/param")]
    return _text(root.find("name")), _text(root.find("description")), params


def _parse_yaml(data: bytes) -> tuple[str, str, list[dict[str, Any]]]:
    loaded = yaml.safe_load(data) or {}
    if not isinstance(loaded, dict):
        raise ValueError("descriptor must be a mapping at the top level")

    raw_params = loaded.get("parameters") or []
    if not isinstance(raw_params, list):
        raise ValueError("`parameters` must be a list when provided")

    params: list[dict[str, Any]] = []
    for item in raw_params:
        if isinstance(item, dict):
            params.append(item)
        else:
            logger.warning("Ignoring malformed parameter entry: %r", item)
    return str(loaded.get("name") or "").strip(), str(loaded.get("description") or "").strip(), params


def _to_parameters(raw: list[dict[str, Any]], source: Path) -> tuple[Parameter, ...]:
    out: list[Parameter] = []
    for item in raw:
        name = str(item.get("name") or "").strip()
        if not name:
            logger.warning("Skipping parameter without a name in %s", source)
            continue
        description = item.get("description")
        if description is None:
            description = item.get("prompt")
        out.append(Parameter(name=name, description=str(description or "")))
    return tuple(out)


def load_descriptor(root: str | Path) -> Descriptor:
    """
    Load the descriptor found in `root`.

    Raises MissingDescriptorError when none of DESCRIPTOR_NAMES exists, and
    DescriptorError when the file exists but cannot be read.
    """
    path = find_descriptor(root)
    if path is None:
        names = ", ".join(DESCRIPTOR_NAMES)
        raise MissingDescriptorError(f"No skeleton descriptor ({names}) found in '{root}'")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DescriptorError(f"Unable to read skeleton descriptor '{path}': {e}") from e

    parse = _parse_xml if path.suffix == ".xml" else _parse_yaml
    try:
        name, description, raw_params = parse(raw)
    except (ET.ParseError, yaml.YAMLError, ValueError) as e:
        logger.warning("Malformed skeleton descriptor '%s': %s", path, e)
        return Descriptor(source=path)

    return Descriptor(
        name=name,
        description=description,
        parameters=_to_parameters(raw_params, path),
        source=path,
    )
