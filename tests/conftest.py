# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for component API coverage tests.

Provides small TypeScript/Vue project layouts written to tmp_path and
pre-built analysis components.
"""

from pathlib import Path
from typing import Callable, Dict

import pytest

from vc_api_coverage.analyzers import ComponentAnalyzer
from vc_api_coverage.matcher import CoverageMatcher
from vc_api_coverage.syntax import SyntaxProvider

WriteProject = Callable[[Dict[str, str]], Path]


@pytest.fixture
def write_project(tmp_path: Path) -> WriteProject:
    """Return a helper writing {relative_path: content} files under tmp_path.

    Parent directories are created as needed. The helper returns the
    project root.
    """

    def _write(files: Dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def analyzer() -> ComponentAnalyzer:
    """ComponentAnalyzer with default settings."""
    return ComponentAnalyzer()


@pytest.fixture
def matcher() -> CoverageMatcher:
    """CoverageMatcher with default mount callees."""
    return CoverageMatcher()


@pytest.fixture
def syntax() -> SyntaxProvider:
    return SyntaxProvider()


@pytest.fixture
def button_project(write_project: WriteProject) -> Path:
    """Component importing its events from a sibling module.

    Layout:
    - events.ts: exports buttonEvents array
    - types.ts: exports ButtonProps interface extending BaseProps
    - Button.ts: defineComponent with emits bound to the import
    - Button.spec.ts: mounts Button and checks one event and one prop
    """
    return write_project(
        {
            "events.ts": "export const buttonEvents = ['click', 'hover', 'focus']\n",
            "types.ts": (
                "export interface BaseProps {\n"
                "  size?: string\n"
                "}\n"
                "export interface ButtonProps extends BaseProps {\n"
                "  label: string\n"
                "  disabled?: boolean\n"
                "}\n"
            ),
            "Button.ts": (
                "import { defineComponent } from 'vue'\n"
                "import { buttonEvents } from './events'\n"
                "\n"
                "export default defineComponent({\n"
                "  props: { label: String, disabled: Boolean },\n"
                "  emits: buttonEvents,\n"
                "  setup(props, { expose }) {\n"
                "    const focus = () => {}\n"
                "    expose({ focus })\n"
                "    return {}\n"
                "  },\n"
                "})\n"
            ),
            "Button.spec.ts": (
                "import { mount } from '@vue/test-utils'\n"
                "import Button from './Button'\n"
                "\n"
                "test('emits click', async () => {\n"
                "  const wrapper = mount(Button, { props: { label: 'Go' } })\n"
                "  await wrapper.trigger('click')\n"
                "  expect(wrapper.emitted('click')).toBeTruthy()\n"
                "})\n"
            ),
        }
    )
