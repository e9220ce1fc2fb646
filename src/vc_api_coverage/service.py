# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""CoverageService - coordinator for component API coverage analysis.

Key Responsibilities:
- Build the ComponentAnalyzer and CoverageMatcher from configuration
- Extract a component's API surface
- Match the surface against one or more test files
- Produce the ComponentCoverage records handed to renderers
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from vc_api_coverage.analyzers.component_analyzer import ComponentAnalyzer
from vc_api_coverage.config import Config
from vc_api_coverage.matcher import CoverageEvidence, CoverageMatcher, build_report
from vc_api_coverage.models import ComponentAPISurface, ComponentCoverage, CoverageReport

logger = logging.getLogger(__name__)

INDEX_STEM = "index"


def component_name(component_path: str) -> str:
    """Display name of a component file.

    `Button.tsx` -> `Button`; `button/index.vue` -> `button`.
    """
    path = Path(component_path)
    if path.stem == INDEX_STEM and path.parent.name:
        return path.parent.name
    return path.stem


class CoverageService:
    """Coordinates surface extraction and coverage matching.

    Owned Components:
    - ComponentAnalyzer: Extracts the ComponentAPISurface of a component
    - CoverageMatcher: Collects test evidence and builds CoverageReports

    Each call is independent: no state is kept between analyses.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        analyzer: Optional[ComponentAnalyzer] = None,
        matcher: Optional[CoverageMatcher] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the service.

        Args:
            config: Configuration. If None, loads .vc_api_coverage.yml from
                the working directory (defaults when absent).
            analyzer: Pre-built analyzer (default: built from config).
            matcher: Pre-built matcher (default: built from config).
            logger: Logger passed to every owned component.
        """
        self._logger = logger or globals()["logger"]
        self.config = config or Config()
        self.analyzer = analyzer or ComponentAnalyzer.from_config(self.config, logger=self._logger)
        self.matcher = matcher or CoverageMatcher(
            mount_callees=self.config.mount_callees,
            syntax=self.analyzer.syntax,
            logger=self._logger,
        )

    def analyze_component(self, component_path: str) -> ComponentAPISurface:
        """Extract the API surface of a component file.

        Raises:
            ComponentReadError: If the component file cannot be read.
            ComponentParseError: If the component file cannot be parsed.
        """
        return self.analyzer.analyze_file(component_path)

    def match(
        self,
        surface: ComponentAPISurface,
        test_source: str,
        test_path: Optional[str] = None,
    ) -> CoverageReport:
        """Match a surface against a single test source text."""
        return self.matcher.match(surface, test_source, test_path)

    def analyze(self, component_path: str, test_paths: Iterable[str]) -> ComponentCoverage:
        """Analyze a component and match it against all of its test files.

        Evidence from all test files is combined; a member is covered when
        any test file covers it. Missing or unreadable test files contribute
        nothing.

        Args:
            component_path: Path to the component file.
            test_paths: Paths to the test files exercising the component.

        Returns:
            ComponentCoverage for renderers.

        Raises:
            ComponentReadError: If the component file cannot be read.
            ComponentParseError: If the component file cannot be parsed.
        """
        surface = self.analyze_component(component_path)
        evidence = CoverageEvidence()

        if not surface.is_empty():
            for test_path in test_paths:
                source = self.analyzer.filesystem.read_text(test_path)
                if source is None:
                    self._logger.warning(f"Test file not readable, skipping: {test_path}")
                    continue
                evidence.merge(self.matcher.collect_evidence(source, test_path))

        report = build_report(surface, evidence)
        coverage = ComponentCoverage(
            file=str(component_path),
            name=component_name(component_path),
            surface=surface,
            report=report,
        )
        self._logger.info(
            f"Analyzed {component_path}: {coverage.covered}/{coverage.total} API members covered"
        )
        return coverage
