# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for CoverageMatcher.

Tests cover:
- Per-category evidence from mount options, wrapper calls and vm access
- JSX and template-string evidence
- Report shape: order and membership mirror the surface
- Tolerant parsing of test sources
"""

from vc_api_coverage.matcher import (
    CoverageEvidence,
    CoverageMatcher,
    build_report,
    camelize,
    handler_to_event,
    template_evidence,
)
from vc_api_coverage.models import ComponentAPISurface, CoverageEntry, MemberList


def _surface(**categories) -> ComponentAPISurface:
    return ComponentAPISurface(
        inputs=MemberList(categories.get("inputs", [])),
        events=MemberList(categories.get("events", [])),
        slots=MemberList(categories.get("slots", [])),
        exposed_members=MemberList(categories.get("exposed", [])),
    )


def _covered(entries):
    return {entry.name: entry.covered for entry in entries}


class TestNameHelpers:
    """Tests for name normalization helpers."""

    def test_camelize(self):
        """Test kebab-case to camelCase."""
        assert camelize("max-length") == "maxLength"
        assert camelize("title") == "title"
        assert camelize("update:model-value") == "update:modelValue"

    def test_handler_to_event(self):
        """Test mapping of onX handler names to event names."""
        assert handler_to_event("onClick") == "click"
        assert handler_to_event("onUpdate:modelValue") == "update:modelValue"
        assert handler_to_event("online") is None
        assert handler_to_event("title") is None


class TestReportShape:
    """Tests for report construction."""

    def test_events_partially_covered(self, matcher: CoverageMatcher):
        """Test that covered and uncovered events keep the declared order."""
        surface = _surface(events=["change", "submit", "cancel"])
        test_source = (
            "const wrapper = mount(Form)\n"
            "await wrapper.find('input').trigger('change')\n"
            "expect(wrapper.emitted('change')).toBeTruthy()\n"
            "expect(wrapper.emitted()).toHaveProperty('submit')\n"
        )

        report = matcher.match(surface, test_source, "Form.spec.ts")

        assert report.events == [
            CoverageEntry("change", True),
            CoverageEntry("submit", True),
            CoverageEntry("cancel", False),
        ]

    def test_inputs_partially_covered(self, matcher: CoverageMatcher):
        """Test that only inputs present in the props block are covered."""
        surface = _surface(inputs=["title", "count"])
        test_source = "const w = mount(Card, { props: { title: 'Hello' } })\n"

        report = matcher.match(surface, test_source, "Card.spec.ts")

        assert report.inputs == [CoverageEntry("title", True), CoverageEntry("count", False)]

    def test_empty_surface_gives_empty_report(self, matcher: CoverageMatcher):
        """Test that an empty surface yields empty lists regardless of test text."""
        report = matcher.match(
            ComponentAPISurface(), "mount(X, { props: { a: 1 } })", "X.spec.ts"
        )

        assert report.inputs == []
        assert report.events == []
        assert report.slots == []
        assert report.exposed_members == []

    def test_build_report_compares_camelized_names(self):
        """Test that kebab-case evidence covers camelCase members."""
        evidence = CoverageEvidence(inputs={"max-length"})

        report = build_report(_surface(inputs=["maxLength", "min"]), evidence)

        assert _covered(report.inputs) == {"maxLength": True, "min": False}

    def test_syntax_errors_in_test_do_not_raise(self, matcher: CoverageMatcher):
        """Test that a broken test file still yields the evidence it contains."""
        surface = _surface(inputs=["title"])
        test_source = "const w = mount(Card, { props: { title: 'x' } })\nconst broken = (\n"

        report = matcher.match(surface, test_source, "Card.spec.ts")

        assert len(report.inputs) == 1


class TestWrapperEvidence:
    """Tests for mount options and wrapper calls."""

    def test_mount_options(self, matcher: CoverageMatcher):
        """Test props, propsData, handler props and slots of mount options."""
        surface = _surface(
            inputs=["title", "legacy", "size"],
            events=["close", "update:modelValue"],
            slots=["header", "default", "footer"],
        )
        test_source = (
            "shallowMount(Dialog, {\n"
            "  props: { title: 'x', onClose: vi.fn(), 'onUpdate:modelValue': vi.fn() },\n"
            "  slots: { header: '<b/>', default: 'body' },\n"
            "})\n"
            "mount(Dialog, { propsData: { legacy: true } })\n"
        )

        report = matcher.match(surface, test_source, "Dialog.spec.ts")

        assert _covered(report.inputs) == {"title": True, "legacy": True, "size": False}
        assert _covered(report.events) == {"close": True, "update:modelValue": True}
        assert _covered(report.slots) == {"header": True, "default": True, "footer": False}

    def test_set_props(self, matcher: CoverageMatcher):
        """Test that setProps keys count as inputs."""
        surface = _surface(inputs=["open", "size"])
        test_source = "const w = mount(Dialog)\nawait w.setProps({ open: true })\n"

        report = matcher.match(surface, test_source, "Dialog.spec.ts")

        assert _covered(report.inputs) == {"open": True, "size": False}

    def test_emitted_collection_access(self, matcher: CoverageMatcher):
        """Test `emitted().x` and `emitted()['x']`."""
        surface = _surface(events=["close", "update:open", "other"])
        test_source = (
            "const w = mount(Dialog)\n"
            "expect(w.emitted().close).toHaveLength(1)\n"
            "expect(w.emitted()['update:open']).toBeTruthy()\n"
        )

        report = matcher.match(surface, test_source, "Dialog.spec.ts")

        assert _covered(report.events) == {"close": True, "update:open": True, "other": False}

    def test_custom_mount_callee(self):
        """Test that only configured mount callees read options."""
        surface = _surface(inputs=["title"])
        test_source = "mountSuspended(Card, { props: { title: 'x' } })\n"

        default_report = CoverageMatcher().match(surface, test_source, "Card.spec.ts")
        custom_report = CoverageMatcher(mount_callees=["mountSuspended"]).match(
            surface, test_source, "Card.spec.ts"
        )

        assert default_report.inputs == [CoverageEntry("title", False)]
        assert custom_report.inputs == [CoverageEntry("title", True)]


class TestExposedEvidence:
    """Tests for exposed members through wrapper.vm."""

    def test_vm_access_forms(self, matcher: CoverageMatcher):
        """Test calls, casts, aliases and destructuring on wrapper.vm."""
        surface = _surface(exposed=["focus", "reset", "clear", "open", "hidden"])
        test_source = (
            "const wrapper = mount(Input)\n"
            "wrapper.vm.focus()\n"
            ";(wrapper.vm as any).reset()\n"
            "const vm = wrapper.vm\n"
            "vm.clear()\n"
            "const { open } = wrapper.vm\n"
        )

        report = matcher.match(surface, test_source, "Input.spec.ts")

        assert _covered(report.exposed_members) == {
            "focus": True,
            "reset": True,
            "clear": True,
            "open": True,
            "hidden": False,
        }

    def test_optional_chaining(self, matcher: CoverageMatcher):
        """Test `wrapper.vm?.x` access."""
        surface = _surface(exposed=["validate"])
        test_source = "const wrapper = mount(Form)\nawait wrapper.vm?.validate()\n"

        report = matcher.match(surface, test_source, "Form.spec.ts")

        assert report.exposed_members == [CoverageEntry("validate", True)]

    def test_vm_destructured_from_mount(self, matcher: CoverageMatcher):
        """Test `const { vm } = mount(...)` and `{ vm: alias }` instance bindings."""
        surface = _surface(exposed=["focus", "reset", "open", "close"])
        test_source = (
            "const { vm } = mount(Dialog)\n"
            "vm.focus()\n"
            "const wrapper = await shallowMount(Dialog)\n"
            "const { vm: dialog } = wrapper\n"
            "dialog.open()\n"
        )

        report = matcher.match(surface, test_source, "Dialog.spec.ts")

        assert _covered(report.exposed_members) == {
            "focus": True,
            "reset": False,
            "open": True,
            "close": False,
        }

    def test_vm_destructured_from_awaited_mount(self, matcher: CoverageMatcher):
        """Test destructuring `vm` from an awaited mount call."""
        surface = _surface(exposed=["submit"])
        test_source = "const { vm: form } = await mount(Form)\nform.submit()\n"

        report = matcher.match(surface, test_source, "Form.spec.ts")

        assert report.exposed_members == [CoverageEntry("submit", True)]

    def test_other_destructured_names_are_not_instances(self, matcher: CoverageMatcher):
        """Test that destructuring anything but `vm` from a mount call binds no instance."""
        surface = _surface(exposed=["focus"])
        test_source = "const { element } = mount(Input)\nelement.focus()\n"

        report = matcher.match(surface, test_source, "Input.spec.ts")

        assert report.exposed_members == [CoverageEntry("focus", False)]


class TestJsxEvidence:
    """Tests for JSX usage in test files."""

    def test_attributes_handlers_and_children(self, matcher: CoverageMatcher):
        """Test JSX attributes, onX handlers and default slot content."""
        surface = _surface(
            inputs=["label", "disabled"], events=["click"], slots=["default", "icon"]
        )
        test_source = (
            "render(<Button label=\"Go\" onClick={() => {}}>Press</Button>)\n"
        )

        report = matcher.match(surface, test_source, "Button.spec.tsx")

        assert _covered(report.inputs) == {"label": True, "disabled": False}
        assert _covered(report.events) == {"click": True}
        assert _covered(report.slots) == {"default": True, "icon": False}

    def test_object_child_and_v_slots(self, matcher: CoverageMatcher):
        """Test slot objects passed as a child or through v-slots."""
        surface = _surface(slots=["header", "footer", "default"])
        test_source = (
            "mount(() => <Card v-slots={{ header: () => 'h' }}>{{ footer: () => 'f' }}</Card>)\n"
        )

        report = matcher.match(surface, test_source, "Card.spec.tsx")

        assert _covered(report.slots) == {"header": True, "footer": True, "default": False}

    def test_lowercase_tags_ignored(self, matcher: CoverageMatcher):
        """Test that attributes of intrinsic elements are not evidence."""
        surface = _surface(inputs=["title"])
        test_source = "render(<div title=\"x\" />)\n"

        report = matcher.match(surface, test_source, "Card.spec.tsx")

        assert report.inputs == [CoverageEntry("title", False)]


class TestTemplateEvidence:
    """Tests for mount-options template strings."""

    def test_template_string_in_mount_options(self, matcher: CoverageMatcher):
        """Test bindings, listeners, v-model and named slots in a template string."""
        surface = _surface(
            inputs=["maxLength", "modelValue", "placeholder"],
            events=["focus", "update:modelValue", "blur"],
            slots=["prefix", "default"],
        )
        test_source = (
            "mount({\n"
            "  components: { MyInput },\n"
            "  template: '<MyInput v-model=\"v\" :max-length=\"3\" @focus=\"f\">"
            "<template #prefix>x</template></MyInput>',\n"
            "})\n"
        )

        report = matcher.match(surface, test_source, "MyInput.spec.ts")

        assert _covered(report.inputs) == {
            "maxLength": True,
            "modelValue": True,
            "placeholder": False,
        }
        assert _covered(report.events) == {
            "focus": True,
            "update:modelValue": True,
            "blur": False,
        }
        assert _covered(report.slots) == {"prefix": True, "default": False}

    def test_template_evidence_directives(self):
        """Test v-bind, v-on, named v-model and default content."""
        evidence = template_evidence(
            "<Pager v-bind:page=\"1\" v-on:change=\"go\" v-model:size=\"s\" v-if=\"ok\">"
            "more</Pager>",
            ["Pager"],
        )

        assert evidence.inputs == {"page", "size"}
        assert evidence.events == {"change", "update:size"}
        assert evidence.slots == {"default"}

    def test_kebab_case_component_tag(self):
        """Test that kebab-case tags are treated as components."""
        evidence = template_evidence("<my-input placeholder=\"x\" @blur=\"b\" />")

        assert evidence.inputs == {"placeholder"}
        assert evidence.events == {"blur"}
