from renaming.collector import collect_binding_identifiers
from renaming.program import parse


def names(source):
    return [identifier.name for identifier in collect_binding_identifiers(parse(source))]


def test_collects_declarations_in_source_order():
    source = (
        "import json as js\n"
        "\n\n"
        "def load(path, *args, **kwargs):\n"
        "    with open(path) as handle:\n"
        "        data = js.load(handle)\n"
        "    try:\n"
        "        pass\n"
        "    except ValueError as error:\n"
        "        raise error\n"
        "    squares = [item * item for item in data]\n"
        "    pick = lambda row: row\n"
        "    if (count := len(squares)) > 0:\n"
        "        return pick(count)\n"
        "    for key in data:\n"
        "        print(key)\n"
    )

    assert names(source) == [
        "js", "load", "path", "args", "kwargs", "handle", "data", "error",
        "squares", "item", "pick", "row", "count", "key",
    ]


def test_use_sites_are_not_collected():
    assert names("a = 1\nprint(a)\nb = a\n") == ["a", "b"]


def test_every_assignment_is_a_declaration_site():
    assert names("x = 1\nx = x + 1\n") == ["x", "x"]


def test_class_members_and_dunders_are_skipped():
    source = (
        "class Greeter:\n"
        "    greeting = 'hi'\n"
        "\n"
        "    def greet(self, name):\n"
        "        return self.greeting + name\n"
    )

    assert names(source) == ["Greeter", "self", "name"]


def test_exported_module_names_are_skipped():
    source = (
        "__all__ = ['helper']\n"
        "\n\n"
        "def helper(value):\n"
        "    return value\n"
        "\n\n"
        "def other():\n"
        "    pass\n"
    )

    assert names(source) == ["value", "other"]


def test_parameters_passed_by_keyword_are_skipped():
    source = "def f(a, b):\n    return a + b\n\n\nresult = f(1, b=2)\n"

    assert names(source) == ["f", "a", "result"]


def test_reserved_names_cover_builtins_free_names_and_pinned_bindings():
    program = parse(
        "class Thing:\n"
        "    size = 1\n"
        "\n\n"
        "def make(x: 'Thing'):\n"
        "    return len(x) + undefined_name\n"
    )

    assert {"len", "undefined_name", "Thing", "size", "print"} <= program.reserved_names
    assert "make" not in program.reserved_names
    assert "x" not in program.reserved_names


def test_dotted_imports_and_string_annotation_targets_are_skipped():
    source = (
        "import os.path\n"
        "\n\n"
        "class Thing:\n"
        "    pass\n"
        "\n\n"
        "def make(x: 'Thing'):\n"
        "    return os.path.join(x)\n"
    )

    assert names(source) == ["make", "x"]


def test_snapshot_survives_renames():
    program = parse("a = 1\nb = a\n")
    identifiers = collect_binding_identifiers(program)

    identifiers[0].scope.rename("a", "b_renamed")

    assert [identifier.name for identifier in identifiers] == ["a", "b"]
    assert isinstance(identifiers, tuple)
