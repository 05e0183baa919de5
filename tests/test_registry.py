import pytest

from glsl_include.core.errors import IncludeNotFoundError
from glsl_include.core.registry import Registry


def test_register_is_chainable_and_last_wins():
    reg = Registry().register("A.glsl", "void old(){}").register("A.glsl", "void A(){}")

    assert reg.get("A.glsl") == "void A(){}"
    assert "A.glsl" in reg
    assert len(reg) == 1


def test_include_alias_and_names():
    reg = Registry({"B.glsl": "void B(){}"})
    reg.include("A.glsl", "void A(){}")

    assert reg.names() == ["A.glsl", "B.glsl"]
    assert list(reg) == ["A.glsl", "B.glsl"]
    assert reg.get("missing") is None


def test_register_rejects_bad_input():
    with pytest.raises(ValueError):
        Registry().register("", "x")
    with pytest.raises(TypeError):
        Registry().register("A.glsl", None)  # type: ignore[arg-type]


def test_expand_and_expand_to_string():
    reg = Registry().register("A.glsl", "void A(){}")

    text, source_map = reg.expand_to_string("#include <A.glsl>\nvoid main(){}")
    assert text == "void A(){}\n#line 1\nvoid main(){}"
    assert source_map.lookup(0).file == "A.glsl"
    assert source_map.lookup(2) is None


def test_processed_set_does_not_persist_between_calls():
    reg = Registry().register("A.glsl", "void A(){}")

    first = reg.expand("#include <A.glsl>")
    second = reg.expand("#include <A.glsl>")
    assert first.text == second.text == "void A(){}\n#line 1"


def test_registration_after_failure_fixes_expansion():
    reg = Registry()
    with pytest.raises(IncludeNotFoundError):
        reg.expand("#include <A.glsl>")

    reg.register("A.glsl", "void A(){}")
    assert reg.expand("#include <A.glsl>").text.startswith("void A(){}")
