"""RIML document: compile entry point and root of the route tree."""

import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from pydantic import Field, PrivateAttr

from riml.builder import add_routes
from riml.errors import ConfigurationError
from riml.loader.tags import SchemaCache
from riml.loader.traits import TraitRegistry
from riml.model.base import RimlEntity, Route
from riml.model.props import COMMON_PROPS, DEFAULT_METHOD_PREFIX, RIML_VERSION

logger = logging.getLogger(__name__)


class Document(RimlEntity):
    """Root of a compiled RIML document.

    Build one with :meth:`from_file`, :meth:`from_text`, :meth:`from_data`
    or :func:`compile_document`. Trait definitions and the include memo
    live on the document for the duration of its compilation.

    ``method_prefix`` is not used while compiling; it is carried for
    consumers that derive handler method names (prefix + ``method``).
    """

    title: Any = None
    description: Any = None
    controller: Any = None
    method: Any = None
    api_type: Any = Field(default=None, alias="apiType")
    auth_type: Any = Field(default=None, alias="authType")

    routes: list[Route] = []
    options: dict[str, Any] = {}
    confdir: str | None = None
    method_prefix: str = DEFAULT_METHOD_PREFIX
    traits: dict[str, dict] = {}

    _schemas: SchemaCache | None = PrivateAttr(default=None)

    def model_post_init(self, context: Any) -> None:
        self._root = self
        self._schemas = SchemaCache(TraitRegistry(self.traits))

    @property
    def schemas(self) -> SchemaCache:
        return self._schemas

    @property
    def included(self) -> dict[str, bool]:
        """Included file path -> True when fully consumed, False when kept for reuse."""
        return self._schemas.includes.included

    @classmethod
    def from_file(
        cls,
        filename: str | os.PathLike,
        confdir: str | os.PathLike | None = None,
        prefix: str | None = None,
    ) -> "Document":
        """Compile the RIML file at ``filename``.

        Includes are resolved against ``confdir``, which defaults to the
        file's own directory.
        """
        path = Path(filename)
        doc = cls._create(confdir if confdir is not None else path.parent, prefix)
        logger.debug(f"Compiling RIML file: {path}")
        text = path.read_text(encoding="utf-8")
        doc._populate(doc.schemas.load_text(text, doc.confdir))
        return doc

    @classmethod
    def from_text(
        cls,
        text: str,
        confdir: str | os.PathLike | None = None,
        prefix: str | None = None,
    ) -> "Document":
        """Compile RIML source held in memory."""
        doc = cls._create(confdir, prefix)
        doc._populate(doc.schemas.load_text(text, doc.confdir))
        return doc

    @classmethod
    def from_data(
        cls,
        data: Mapping,
        confdir: str | os.PathLike | None = None,
        prefix: str | None = None,
    ) -> "Document":
        """Build the tree from an already parsed mapping (no tag expansion)."""
        doc = cls._create(confdir, prefix)
        doc._populate(data)
        return doc

    @classmethod
    def _create(cls, confdir: str | os.PathLike | None, prefix: str | None) -> "Document":
        return cls(
            confdir=str(confdir) if confdir is not None else None,
            method_prefix=prefix if prefix is not None else DEFAULT_METHOD_PREFIX,
        )

    def _populate(self, source: Any) -> None:
        if source is None:
            source = {}
        if not isinstance(source, Mapping):
            raise ConfigurationError(
                f"RIML document root must be a mapping, got {type(source).__name__}"
            )
        remaining = dict(source)
        for pname in COMMON_PROPS:
            if pname in remaining:
                setattr(self, self._field_for(pname), remaining.pop(pname))
        add_routes(self, remaining)

    @classmethod
    def _field_for(cls, alias: str) -> str:
        for name, field in cls.model_fields.items():
            if (field.alias or name) == alias:
                return name
        return alias

    @property
    def root(self) -> "Document":
        return self

    def version(self) -> str:
        """Revision of the RIML document model this compiler implements."""
        return RIML_VERSION

    def has_routes(self) -> bool:
        return len(self.routes) > 0

    def iter_routes(self) -> Iterator[Route]:
        """Yield every route of the tree, depth first, in declaration order."""
        stack = list(reversed(self.routes))
        while stack:
            route = stack.pop()
            yield route
            stack.extend(reversed(route.routes))

    def to_dict(self) -> dict[str, Any]:
        """Dump the tree with RIML property names, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"traits"})


def compile_document(source: Any) -> Document:
    """Compile a RIML document from a filename or a named-argument mapping.

    ``source`` is either a filename, or a mapping with optional ``dir`` and
    ``prefix`` entries plus one of ``file``, ``text`` or ``data``.
    """
    if isinstance(source, (str, os.PathLike)):
        return Document.from_file(source)
    if not isinstance(source, Mapping):
        raise ConfigurationError(f"Invalid RIML source: {type(source).__name__}")

    confdir = source.get("dir")
    prefix = source.get("prefix")
    if "file" in source:
        return Document.from_file(source["file"], confdir=confdir, prefix=prefix)
    if "text" in source:
        return Document.from_text(source["text"], confdir=confdir, prefix=prefix)
    if "data" in source:
        return Document.from_data(source["data"], confdir=confdir, prefix=prefix)
    raise ConfigurationError("RIML source needs one of 'file', 'text' or 'data'")
