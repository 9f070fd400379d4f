"""YAML loaders carrying the RIML custom tags.

One loader class is built per configuration directory and cached on the
document, so repeated loads from the same directory reuse it.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from riml.loader.include import IncludeResolver
from riml.loader.traits import TraitRegistry
from riml.model.props import CONTROLLER_MARKER, METHOD_MARKER

logger = logging.getLogger(__name__)


class SchemaCache:
    """Per-directory YAML loader classes sharing one include memo and trait registry."""

    def __init__(self, registry: TraitRegistry):
        self.registry = registry
        self.includes = IncludeResolver(self.load_file)
        self._loaders: dict[str | None, type[yaml.SafeLoader]] = {}

    def get(self, confdir: str | Path | None) -> type[yaml.SafeLoader]:
        key = str(confdir) if confdir is not None else None
        if key not in self._loaders:
            logger.debug(f"Building YAML loader for directory: {key}")
            self._loaders[key] = make_loader(self.includes, self.registry, key)
        return self._loaders[key]

    def load_text(self, text: str, confdir: str | Path | None) -> Any:
        return yaml.load(text, Loader=self.get(confdir))

    def load_file(self, path: str | Path) -> Any:
        """Parse a file; includes inside it resolve relative to its directory."""
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        return self.load_text(text, path.parent)


def make_loader(
    includes: IncludeResolver,
    registry: TraitRegistry,
    confdir: str | None,
) -> type[yaml.SafeLoader]:
    """Create a SafeLoader subclass with the RIML tags bound to ``confdir``."""

    class Loader(yaml.SafeLoader):
        def construct_object(self, node, deep=False):
            # Depth-first, in source order: a !define is registered
            # before any later !use that needs it.
            return super().construct_object(node, deep=True)

    def _mapping(loader: Loader, node: yaml.Node) -> dict:
        if isinstance(node, yaml.ScalarNode) and not loader.construct_scalar(node):
            return {}
        return loader.construct_mapping(node, deep=True)

    def _include(loader: Loader, node: yaml.Node):
        return includes.resolve(loader.construct_scalar(node), confdir, True)

    def _include_path(loader: Loader, node: yaml.Node):
        return includes.resolve(loader.construct_scalar(node), confdir, False)

    def _define(loader: Loader, node: yaml.Node):
        return registry.define(_mapping(loader, node))

    def _use(loader: Loader, node: yaml.Node):
        return registry.use(_mapping(loader, node))

    def _controller(loader: Loader, node: yaml.Node):
        data = _mapping(loader, node)
        data[CONTROLLER_MARKER] = True
        return data

    def _method(loader: Loader, node: yaml.Node):
        data = _mapping(loader, node)
        data[METHOD_MARKER] = True
        return data

    def _virtual(loader: Loader, node: yaml.Node):
        data = _mapping(loader, node)
        data["virtual"] = True
        return data

    Loader.add_constructor("!include", _include)
    Loader.add_constructor("!includePath", _include_path)
    Loader.add_constructor("!define", _define)
    Loader.add_constructor("!use", _use)
    Loader.add_constructor("!controller", _controller)
    Loader.add_constructor("!method", _method)
    Loader.add_constructor("!virtual", _virtual)
    return Loader
