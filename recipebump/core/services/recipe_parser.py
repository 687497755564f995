"""
Recipe parser — recipe text into a Recipe plus the positions of its fields.

The patcher never re-serializes a Recipe; it edits the original text.  To
do that safely the parser reports where each editable value lives:

    version_span      the ``version:`` scalar
    url_spans[i]      the ``url:`` scalar of package i
    checksum_spans[i] the ``sha256:`` scalar of package i

Spans are character offsets into the text handed to ``parse()`` and
include quotes for quoted scalars.

The YAML implementation works on PyYAML's composed node graph, so it sees
the exact scalar text.  ``version``, ``url`` and ``sha256`` are taken
verbatim from their scalars, which keeps ``version: 1.10`` as the string
``"1.10"`` instead of the float ``1.1``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import yaml
from pydantic import ValidationError as PydanticValidationError

from recipebump.core.errors import LoadError
from recipebump.core.models.recipe import Recipe

logger = logging.getLogger(__name__)

VERSION_PLACEHOLDER = "${{ version }}"

_VERBATIM_PACKAGE_KEYS = ("url", "sha256")


@dataclass(frozen=True)
class Span:
    """A half-open ``[start, end)`` character range in the recipe text."""

    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


@dataclass(frozen=True)
class RecipeDocument:
    """A parsed recipe together with the text it came from."""

    recipe: Recipe
    text: str
    version_span: Span
    url_spans: tuple[Span, ...]
    checksum_spans: tuple[Span, ...]
    source: str = "<recipe>"


class RecipeParser(Protocol):
    """Anything that can turn recipe text into a RecipeDocument."""

    suffixes: tuple[str, ...]

    def parse(self, text: str, *, source: str = "<recipe>") -> RecipeDocument:
        """Parse ``text``; raise LoadError when it is not a valid recipe."""
        ...


def expand_url(url: str, version: str) -> str:
    """Expand the ``${{ version }}`` placeholder in a package URL."""
    return url.replace(VERSION_PLACEHOLDER, version)


def _span(node: yaml.Node) -> Span:
    return Span(node.start_mark.index, node.end_mark.index)


def _scalar(node: yaml.Node, key: str, source: str) -> yaml.ScalarNode:
    if not isinstance(node, yaml.ScalarNode):
        raise LoadError(f"'{key}' must be a plain value", path=source)
    return node


def _mapping_items(node: yaml.Node) -> dict[str, yaml.Node]:
    items: dict[str, yaml.Node] = {}
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode):
            items[key_node.value] = value_node
    return items


class YamlRecipeParser:
    """Parse ``<name>.yaml`` recipe files.

    Expected shape::

        name: gh
        version: 2.0.0
        homepage: https://github.com/cli/cli
        packages:
          - os: linux
            arch: amd64
            url: https://github.com/cli/cli/releases/download/v2.0.0/gh_2.0.0_linux_amd64.tar.gz
            sha256: 0123...cdef
    """

    suffixes = (".yaml", ".yml")

    def parse(self, text: str, *, source: str = "<recipe>") -> RecipeDocument:
        loader = yaml.SafeLoader(text)
        try:
            root = loader.get_single_node()
            data = loader.construct_document(root) if root is not None else None
        except yaml.YAMLError as e:
            raise LoadError(f"invalid YAML: {e}", path=source) from e
        finally:
            loader.dispose()

        if root is None or not isinstance(root, yaml.MappingNode) or not isinstance(data, dict):
            raise LoadError("expected a YAML mapping", path=source)

        fields = _mapping_items(root)

        version_node = fields.get("version")
        if version_node is None:
            raise LoadError("missing required field 'version'", path=source)
        version_node = _scalar(version_node, "version", source)
        data["version"] = version_node.value

        packages_node = fields.get("packages")
        if not isinstance(packages_node, yaml.SequenceNode):
            raise LoadError("'packages' must be a list", path=source)

        url_spans: list[Span] = []
        checksum_spans: list[Span] = []
        # Every edited value needs its own place in the text
        claimed = {_span(version_node)}
        packages_data: list[dict[str, Any]] = []
        for index, package_node in enumerate(packages_node.value):
            if not isinstance(package_node, yaml.MappingNode):
                raise LoadError(f"package #{index + 1} must be a mapping", path=source)
            package_fields = _mapping_items(package_node)
            raw = dict(data["packages"][index])
            for key in _VERBATIM_PACKAGE_KEYS:
                node = package_fields.get(key)
                if node is None:
                    raise LoadError(f"package #{index + 1} is missing '{key}'", path=source)
                raw[key] = _scalar(node, key, source).value
                span = _span(node)
                if span in claimed:
                    raise LoadError(
                        f"package #{index + 1} '{key}': YAML aliases are not supported"
                        " for url or sha256",
                        path=source,
                    )
                claimed.add(span)
            url_spans.append(_span(package_fields["url"]))
            checksum_spans.append(_span(package_fields["sha256"]))
            raw["url"] = expand_url(raw["url"], data["version"])
            packages_data.append(raw)
        data["packages"] = packages_data

        try:
            recipe = Recipe.model_validate(data)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise LoadError(f"invalid recipe: {problems}", path=source) from e

        return RecipeDocument(
            recipe=recipe,
            text=text,
            version_span=_span(version_node),
            url_spans=tuple(url_spans),
            checksum_spans=tuple(checksum_spans),
            source=source,
        )
