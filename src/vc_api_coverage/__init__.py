# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Vue component API surface extraction and test coverage matching."""

from .analyzers import ComponentAnalyzer
from .config import Config
from .errors import ComponentParseError, ComponentReadError, ConfigurationError, CoverageError
from .imports import collect_imports
from .lookup import CrossModuleLookup, ResolutionContext
from .matcher import CoverageMatcher
from .models import (
    Category,
    ComponentAPISurface,
    ComponentCoverage,
    CoverageEntry,
    CoverageReport,
    ImportBinding,
    MemberList,
)
from .service import CoverageService
from .syntax import SyntaxProvider

__version__ = "0.1.0"

__all__ = [
    "Category",
    "ComponentAPISurface",
    "ComponentAnalyzer",
    "ComponentCoverage",
    "ComponentParseError",
    "ComponentReadError",
    "Config",
    "ConfigurationError",
    "CoverageEntry",
    "CoverageError",
    "CoverageMatcher",
    "CoverageReport",
    "CoverageService",
    "CrossModuleLookup",
    "ImportBinding",
    "MemberList",
    "ResolutionContext",
    "SyntaxProvider",
    "collect_imports",
]
