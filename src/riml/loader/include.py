"""File inclusion for ``!include`` and ``!includePath``."""

import logging
from pathlib import Path
from typing import Any, Callable

from riml.model.props import POLY_KEY

logger = logging.getLogger(__name__)


class IncludeResolver:
    """Resolves included files and remembers which ones were already consumed.

    A file is expanded into the tree once; later references to it yield
    ``None``. Files marked with a truthy ``.includePoly`` are kept and
    handed out again on every reference.
    """

    def __init__(self, load_file: Callable[[Path], Any]):
        self._load_file = load_file
        self.included: dict[str, bool] = {}
        self.sources: dict[str, Any] = {}

    def resolve(self, filename: str, base_dir: str | Path | None, force_pathless: bool) -> Any:
        """Load ``filename`` relative to ``base_dir``.

        Args:
            filename: Name from the tag; relative names are joined with ``base_dir``.
            base_dir: Directory of the document holding the tag, if known.
            force_pathless: Default ``noPath`` to true on the loaded mapping.

        Returns:
            The loaded mapping, or None when the file was already consumed.
        """
        path = Path(filename)
        if not path.is_absolute() and base_dir is not None:
            path = Path(base_dir) / path
        key = str(path.resolve())

        if key in self.included:
            if self.included[key]:
                logger.debug(f"Include already consumed, skipping: {key}")
                return None
            logger.debug(f"Reusing poly include: {key}")
            return self.sources[key]

        # Marked before parsing so a file that includes itself stops here.
        self.included[key] = True
        logger.debug(f"Including file: {key}")
        data = self._load_file(path)

        if isinstance(data, dict):
            if data.get(POLY_KEY):
                self.included[key] = False
                self.sources[key] = data
                return data
            data.setdefault("virtual", True)
            if force_pathless:
                data.setdefault("noPath", True)
        return data
