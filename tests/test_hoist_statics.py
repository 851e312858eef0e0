import unittest

import pytest

from liteinject import hoist_statics, inject


class Widget:
    """A widget."""

    VERSION = 3
    registry = {"a": 1}

    def __init__(self, deps, name):
        self.deps = deps
        self.name = name

    @staticmethod
    def helper():
        return "help"

    @classmethod
    def named(cls, name):
        return cls(name)

    def describe(self):
        return f"{self.name}: {sorted(self.deps)}"


class TestInjectHoistsStatics(unittest.TestCase):
    def setUp(self):
        self.mapping = {"db": "sqlite"}
        self.decorated = inject(self.mapping)(Widget)

    def test_static_attributes_are_identical_references(self):
        assert self.decorated.VERSION is Widget.VERSION
        assert self.decorated.registry is Widget.registry

    def test_static_methods_are_identical_references(self):
        assert self.decorated.helper is Widget.helper
        assert self.decorated.helper() == "help"

    def test_classmethod_constructor_goes_through_injection(self):
        w = self.decorated.named("foo")

        assert isinstance(w, Widget)
        assert w.deps == {"db": "sqlite"}
        assert w.name == "foo"

    def test_instances_keep_wrapped_class_methods(self):
        assert self.decorated("foo").describe() == "foo: ['db']"

    def test_dunder_members_are_not_hoisted(self):
        assert "__init__" not in vars(self.decorated)
        assert "__new__" in vars(self.decorated)
        assert self.decorated.__name__ == "Widget"

    def test_static_named_like_decorator_attribute_is_not_hoisted(self):
        class Clashing:
            injection_map = "mine"
            wrapped_class = "mine"

            def __init__(self, deps):
                self.deps = deps

        decorated = inject(self.mapping)(Clashing)

        assert decorated.injection_map is self.mapping
        assert decorated.wrapped_class is Clashing


def test_inject_with_explicit_statics_forwards_only_listed_members():
    decorated = inject({}, statics=["helper", "VERSION"])(Widget)

    assert decorated.helper is Widget.helper
    assert decorated.VERSION == 3
    assert not hasattr(decorated, "registry")
    assert not hasattr(decorated, "named")


def test_inject_with_explicit_statics_missing_member_raises():
    with pytest.raises(AttributeError):
        inject({}, statics=["missing"])(Widget)


def test_hoist_statics_returns_mutated_target():
    class Target: ...

    result = hoist_statics(Target, Widget)

    assert result is Target
    assert Target.VERSION == 3
    assert Target.helper is Widget.helper
    assert Target.__name__ == "Target"
    assert Target.__doc__ is None


def test_hoist_statics_overwrites_existing_members():
    class Target:
        VERSION = 1

    hoist_statics(Target, Widget)

    assert Target.VERSION == 3


def test_hoist_statics_explicit_names_reach_inherited_members():
    class Child(Widget): ...

    class Target: ...

    hoist_statics(Target, Child, names=["VERSION", "__doc__"])

    assert Target.VERSION == 3
    assert Target.__doc__ is None
