# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Analyzers that turn component source files into API surfaces.

Components:
- ComponentAnalyzer: Reads, parses and extracts the four API categories
"""

from vc_api_coverage.analyzers.component_analyzer import ComponentAnalyzer

__all__ = ["ComponentAnalyzer"]
