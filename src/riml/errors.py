"""Exceptions raised while compiling a RIML document.

Filesystem and YAML syntax errors are not wrapped: they propagate
unchanged from the underlying ``open`` / ``yaml`` calls.
"""


class RimlError(Exception):
    """Base class for all RIML compilation failures."""


class ConfigurationError(RimlError):
    """The compile entry point was given an unusable source."""


class TraitDefinitionError(RimlError):
    """A ``!define`` mapping has no ``.trait`` name."""


class TraitNotFoundError(RimlError):
    """A ``!use`` mapping refers to a trait that was never defined."""

    def __init__(self, name: str):
        super().__init__(f"Trait {name!r} not found")
        self.name = name


class UnfulfilledVariableError(RimlError):
    """A trait placeholder has no matching entry in the using ``.vars``."""

    def __init__(self, varname: str, trait: str):
        super().__init__(f"Unfulfilled variable {varname!r} in use of trait {trait!r}")
        self.varname = varname
        self.trait = trait


class PlaceholderPathError(RimlError):
    """A placeholder path walks into something that is not a mapping or string."""

    def __init__(self, pathspec: str, segment: str):
        super().__init__(f"Invalid placeholder path spec {pathspec!r} at segment {segment!r}")
        self.pathspec = pathspec
        self.segment = segment
