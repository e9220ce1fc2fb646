# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Component API surface analyzer.

This module implements the extraction pipeline for one component file:
1. File Reading: size limit, UTF-8 with latin-1 fallback
2. Parsing: tree-sitter via SyntaxProvider (SFC script block for .vue)
3. Import Collection: local-name -> ImportBinding map
4. Category Extraction: one CategoryExtractor per category, each trying its
   strategies in priority order and chasing references across modules

Error Recovery:
- Missing, unreadable or oversized component file: ComponentReadError
- Component file with syntax errors: ComponentParseError
- Anything wrong in a dependency: resolution miss, logged at DEBUG
- Invalid constructor settings: ConfigurationError (the YAML Config
  instead warns and falls back to defaults)
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

from vc_api_coverage.config import RESERVED_INPUT_NAMES, Config
from vc_api_coverage.errors import ComponentReadError, ConfigurationError
from vc_api_coverage.extractors.category_extractor import (
    DEFAULT_DEFINE_CALLEES,
    CategoryExtractor,
    create_category_extractors,
)
from vc_api_coverage.extractors.normalizer import Normalizer
from vc_api_coverage.filesystem import (
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DEFAULT_MODULE_EXTENSIONS,
    FileSystemAccessor,
    PathResolver,
)
from vc_api_coverage.lookup import DEFAULT_MAX_RESOLUTION_DEPTH, CrossModuleLookup, ModuleScope
from vc_api_coverage.models import Category, ComponentAPISurface
from vc_api_coverage.syntax import SyntaxProvider

logger = logging.getLogger(__name__)


class ComponentAnalyzer:
    """Extracts the ComponentAPISurface of component files.

    Each analyze call owns fresh import maps and resolution state; nothing is
    cached between calls. An instance holds tree-sitter parsers and is
    therefore NOT thread-safe; use one analyzer per thread.
    """

    def __init__(
        self,
        define_callees: Sequence[str] = DEFAULT_DEFINE_CALLEES,
        reserved_input_names: Sequence[str] = tuple(RESERVED_INPUT_NAMES),
        module_extensions: Sequence[str] = DEFAULT_MODULE_EXTENSIONS,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
        max_resolution_depth: int = DEFAULT_MAX_RESOLUTION_DEPTH,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize component analyzer.

        Args:
            define_callees: Callees whose first argument is component options.
            reserved_input_names: Names dropped from instance-derived inputs.
            module_extensions: Extension inference order for imports.
            max_file_size_bytes: Files larger than this are unreadable.
            max_resolution_depth: Maximum cross-module hops per chain.
            logger: Logger for diagnostics (default: module logger).

        Raises:
            ConfigurationError: If no define callee is given or a limit is not positive.
        """
        _validate_settings(define_callees, max_file_size_bytes, max_resolution_depth)
        self._logger = logger or globals()["logger"]
        self.syntax = SyntaxProvider(logger=self._logger)
        self.filesystem = FileSystemAccessor(max_file_size_bytes, logger=self._logger)
        self.path_resolver = PathResolver(self.filesystem, module_extensions)
        self.lookup = CrossModuleLookup(
            self.syntax,
            self.filesystem,
            self.path_resolver,
            max_depth=max_resolution_depth,
            logger=self._logger,
        )
        self.extractors: Dict[str, CategoryExtractor] = create_category_extractors(
            define_callees, reserved_input_names, logger=self._logger
        )

    @classmethod
    def from_config(
        cls, config: Config, logger: Optional[logging.Logger] = None
    ) -> "ComponentAnalyzer":
        return cls(
            define_callees=config.component_define_callees,
            reserved_input_names=config.reserved_input_names,
            module_extensions=config.module_extensions,
            max_file_size_bytes=config.max_file_size_bytes,
            max_resolution_depth=config.max_resolution_depth,
            logger=logger,
        )

    def analyze_file(self, filepath: str) -> ComponentAPISurface:
        """Analyze a component file.

        Args:
            filepath: Path to the component (.vue, .tsx, .ts, .jsx, .js).

        Returns:
            The extracted ComponentAPISurface.

        Raises:
            ComponentReadError: If the file is missing, unreadable or too large.
            ComponentParseError: If the file cannot be parsed.
        """
        resolved = str(Path(filepath).resolve())
        if not self.filesystem.exists(resolved):
            raise ComponentReadError(f"Component file not found: {filepath}")
        source = self.filesystem.read_text(resolved)
        if source is None:
            raise ComponentReadError(f"Component file could not be read: {filepath}")
        return self.analyze_source(source, resolved)

    def analyze_source(self, source: str, filepath: Optional[str] = None) -> ComponentAPISurface:
        """Analyze component source text.

        Relative imports are resolved against the directory of `filepath`
        (the current working directory when omitted).

        Raises:
            ComponentParseError: If the source cannot be parsed.
        """
        module = self.syntax.parse(source, path=filepath)
        scope = ModuleScope.from_module(module)
        normalizer = Normalizer(self.lookup, self.lookup.new_context(), logger=self._logger)

        surface = ComponentAPISurface()
        for category in Category.ALL:
            names = self.extractors[category].extract(scope, normalizer)
            surface.get(category).extend(names)

        self._logger.debug(f"Extracted surface of {filepath or '<source>'}: {surface.to_dict()}")
        return surface


def _validate_settings(
    define_callees: Sequence[str], max_file_size_bytes: int, max_resolution_depth: int
) -> None:
    if not define_callees or not all(isinstance(name, str) and name for name in define_callees):
        raise ConfigurationError(
            f"define_callees must be a non-empty list of names, got {list(define_callees)!r}"
        )
    if max_file_size_bytes <= 0:
        raise ConfigurationError(
            f"max_file_size_bytes must be positive, got {max_file_size_bytes}"
        )
    if max_resolution_depth <= 0:
        raise ConfigurationError(
            f"max_resolution_depth must be positive, got {max_resolution_depth}"
        )
