import pytest

from renaming import (
    OracleError,
    ParseError,
    Registry,
    RenameConfig,
    RenameError,
    rename_identifiers,
    visit_all_identifiers,
)

JAVASCRIPT_SOURCE = "function f(a) { return a + 1; } f(5);"
ADD_ONE_PY = "def f(a):\n    return a + 1\n\n\nf(5)\n"


def test_renames_functions_and_parameters(mapping_oracle):
    calls = []
    oracle = mapping_oracle({"f": "add_one", "a": "x"}, calls)

    renamed = rename_identifiers(ADD_ONE_PY, oracle)

    assert renamed == "def add_one(x):\n    return x + 1\n\n\nadd_one(5)\n"
    assert [name for name, _ in calls] == ["f", "a"]
    # the parameter's excerpt already shows the new function name
    assert "def add_one(a)" in calls[1][1]


def test_identity_oracle_keeps_source_intact(identity_oracle):
    source = (
        "# comment stays\n"
        "import os as operating_system\n"
        "from json import loads\n\n"
        "def outer(x, *rest, **options):\n"
        "    total = [y * 2 for y in rest]  # trailing\n"
        "    return loads(x), total, options\n"
    )

    assert rename_identifiers(source, identity_oracle) == source


def test_same_name_in_sibling_scopes_is_asked_once(mapping_oracle):
    calls = []
    source = "def f():\n    tmp = 1\n    return tmp\n\n\ndef g():\n    tmp = 2\n    return tmp\n"

    renamed = rename_identifiers(source, mapping_oracle({"tmp": "scratch"}, calls))

    assert [name for name, _ in calls] == ["f", "tmp", "g"]
    assert renamed.count("scratch") == 4


def test_invalid_code_raises_parse_error(identity_oracle):
    with pytest.raises(ParseError):
        rename_identifiers(JAVASCRIPT_SOURCE, identity_oracle)


def test_failures_share_one_base_class(identity_oracle):
    with pytest.raises(RenameError):
        rename_identifiers("def f(:\n", identity_oracle)


def run(source):
    namespace = {}
    exec(compile(source, "<renamed>", "exec"), namespace)
    return namespace


def test_keyword_calls_keep_working(mapping_oracle):
    source = "def f(a, b):\n    return a - b\n\n\nresult = f(5, b=2)\n"

    renamed = rename_identifiers(source, mapping_oracle({"f": "subtract", "a": "x", "b": "y", "result": "out"}))

    assert renamed == "def subtract(x, b):\n    return x - b\n\n\nout = subtract(5, b=2)\n"
    assert run(renamed)["out"] == 3


def test_builtins_and_pinned_names_are_not_captured(mapping_oracle):
    source = (
        "class Thing:\n"
        "    def __init__(self, size):\n"
        "        self.size = size\n"
        "\n\n"
        "def make(a: 'Thing') -> 'Thing':\n"
        "    return Thing(len(a))\n"
        "\n\n"
        "result = make([1, 2]).size\n"
    )

    renamed = rename_identifiers(source, mapping_oracle({"make": "Thing", "a": "len", "size": "len"}))

    assert "def __init__(self, _len):" in renamed
    assert "def _Thing(__len: 'Thing')" in renamed
    assert run(renamed)["result"] == 2


def test_exported_names_stay_importable(mapping_oracle):
    source = "__all__ = ['helper']\n\n\ndef helper():\n    return 1\n"

    renamed = rename_identifiers(source, mapping_oracle({"helper": "helper_renamed"}))

    assert renamed == source
    assert run(renamed)["helper"]() == 1


def test_proposals_equal_after_normalisation_stay_distinct(mapping_oracle):
    source = "a = 1\nb = 2\nresult = (a, b)\n"

    renamed = rename_identifiers(source, mapping_oracle({"a": "\ufb01le", "b": "file"}))

    assert run(renamed)["result"] == (1, 2)


def test_unusable_characters_are_escaped(mapping_oracle):
    renamed = rename_identifiers("a = 1\n", mapping_oracle({"a": "n\u00b2"}))

    assert renamed == "_n_ = 1\n"


def test_async_oracles_are_awaited():
    async def oracle(name, surrounding_code):
        return name + "_value"

    assert rename_identifiers("a = 1\n", oracle) == "a_value = 1\n"


def test_non_string_answer_is_an_oracle_error():
    def oracle(name, surrounding_code):
        return 42

    with pytest.raises(OracleError) as excinfo:
        rename_identifiers("a = 1\n", oracle)

    assert excinfo.value.name == "a"


def test_invalid_proposals_are_escaped(mapping_oracle):
    renamed = rename_identifiers("a = 1\nb = 2\n", mapping_oracle({"a": "class", "b": "2nd"}))

    assert renamed == "_class = 1\n_2nd = 2\n"


def test_registry_records_committed_names(mapping_oracle):
    registry = Registry()

    rename_identifiers("a = 1\nb = a\n", mapping_oracle({"a": "x", "b": "x"}), registry=registry)

    assert registry.renames == {"a": "x", "b": "_x"}


def test_visit_all_identifiers_is_a_coroutine(identity_oracle):
    import asyncio

    result = asyncio.run(visit_all_identifiers("a = 1\n", identity_oracle, config=RenameConfig(context_window=10)))

    assert result == "a = 1\n"
