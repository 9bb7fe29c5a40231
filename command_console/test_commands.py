"""
Tests for tokenizing, command registration and dispatch.

Run with:  python -m pytest command_console -v
"""

import pytest

from command_console import BufferedUI, Category, Command, CommandResult, create_console
from command_console.builtins import HelpCommand, WaitLoadCommand
from command_console.registry import CommandRegistry
from command_console.spawn import Color, PrimitiveType, Scene, SpawnCommand, Vector3
from command_console.tokenizer import tokenize


class NamedCommand(Command):
    """Minimal command for registry tests."""

    def __init__(self, name, tag=0, category=Category.GENERAL):
        self._name = name
        self._tag = tag
        self._category = category
        self.calls = []

    @property
    def name(self):
        return self._name

    @property
    def description(self):
        return f"{self._name} command"

    @property
    def category(self):
        return self._category

    @property
    def tag(self):
        return self._tag

    def usage(self):
        return f"Usage: {self._name} [args]"

    def execute(self, args, context):
        self.calls.append(list(args))
        return CommandResult.ok(self.name, f"{self._name}: {' '.join(args)}")


class BoomCommand(NamedCommand):

    def __init__(self):
        super().__init__("boom")

    def execute(self, args, context):
        raise RuntimeError("kaboom")


@pytest.fixture
def ui():
    return BufferedUI()


@pytest.fixture
def scene():
    return Scene()


@pytest.fixture
def console(ui, scene):
    console = create_console(
        ui,
        commands=[WaitLoadCommand(), SpawnCommand(scene), NamedCommand("say"), BoomCommand()],
    )
    ui.take()  # drop "Console ready"
    return console


# ============================================================
# Tokenizer
# ============================================================

class TestTokenize:
    """Tests for quote-aware line splitting."""

    def test_plain_words(self):
        assert tokenize("spawn cube 5 10 0") == ["spawn", "cube", "5", "10", "0"]

    def test_quoted_span_is_one_token(self):
        assert tokenize('say "hello world"') == ["say", "hello world"]

    def test_escaped_quote_is_preserved(self):
        assert tokenize('say "a\\"b"') == ["say", 'a\\"b']

    def test_unterminated_quote_takes_rest_of_line(self):
        assert tokenize('say "abc') == ["say", "abc"]

    def test_unterminated_quote_keeps_inner_spaces(self):
        assert tokenize('say "abc  def') == ["say", "abc  def"]

    def test_empty_input(self):
        assert tokenize("") == []

    def test_blank_input(self):
        assert tokenize(" \t  ") == []

    def test_tabs_and_runs_of_spaces_separate(self):
        assert tokenize("a\t\tb    c") == ["a", "b", "c"]

    def test_empty_quotes_give_empty_token(self):
        assert tokenize('say ""') == ["say", ""]

    def test_escaped_leading_quote_is_bare(self):
        assert tokenize('say \\"x') == ["say", '\\"x']

    def test_token_cap_stops_collection(self):
        assert tokenize("a b c d e", max_tokens=2) == ["a", "b"]

    def test_quote_at_line_start(self):
        assert tokenize('"quoted name" arg') == ["quoted name", "arg"]


# ============================================================
# Registry
# ============================================================

class TestCommandRegistry:
    """Tests for registration, removal and lookup."""

    def test_register_and_lookup(self):
        registry = CommandRegistry()
        cmd = NamedCommand("say")
        assert registry.register(cmd)
        assert registry.lookup("say") is cmd

    def test_lookup_is_case_insensitive(self):
        registry = CommandRegistry()
        cmd = NamedCommand("Say")
        registry.register(cmd)
        assert registry.lookup("SAY") is cmd
        assert "sAy" in registry

    def test_duplicate_differing_in_case_is_rejected(self):
        registry = CommandRegistry()
        first = NamedCommand("Say")
        assert registry.register(first)
        assert not registry.register(NamedCommand("say"))
        assert registry.lookup("say") is first
        assert len(registry) == 1

    def test_register_none_is_rejected(self):
        assert not CommandRegistry().register(None)

    def test_names_are_stored_lowercase(self):
        registry = CommandRegistry()
        registry.register(NamedCommand("Spawn"))
        assert registry.all_names() == {"spawn"}

    def test_unregister(self):
        registry = CommandRegistry()
        registry.register(NamedCommand("say"))
        assert registry.unregister("SAY")
        assert not registry.unregister("say")
        assert registry.lookup("say") is None

    def test_unregister_by_tag(self):
        registry = CommandRegistry()
        registry.register(NamedCommand("a", tag=7))
        registry.register(NamedCommand("b", tag=7))
        registry.register(NamedCommand("c", tag=0))
        assert registry.unregister_by_tag(7) == 2
        assert registry.all_names() == {"c"}
        assert registry.unregister_by_tag(7) == 0

    def test_filter_by_category(self):
        registry = CommandRegistry()
        registry.register(NamedCommand("a", category=Category.DEBUG))
        registry.register(NamedCommand("b"))
        debug = registry.all_commands(Category.DEBUG)
        assert [c.name for c in debug] == ["a"]
        assert len(registry.all_commands()) == 2

    def test_register_all_counts_successes(self):
        registry = CommandRegistry()
        added = registry.register_all([NamedCommand("a"), NamedCommand("A"), NamedCommand("b")])
        assert added == 2

    def test_names_keep_registration_order(self):
        registry = CommandRegistry()
        for name in ["zeta", "alpha", "mid"]:
            registry.register(NamedCommand(name))
        assert registry.names() == ["zeta", "alpha", "mid"]


class TestCommandHelpers:
    """Tests for the argument helpers on Command."""

    def test_exact_count(self, console, ui):
        cmd = NamedCommand("x")
        assert cmd.check_arg_count(["a"], console.context, 1)
        assert ui.lines == []

    def test_range_failure_prints_error_and_usage(self, console, ui):
        cmd = NamedCommand("x")
        assert not cmd.check_arg_count(["a", "b", "c"], console.context, 0, 2)
        assert ui.lines == ["[ERROR] Invalid argument count. Expected 0-2, got 3",
                            "Usage: x [args]"]

    def test_parse_int_failure(self, console, ui):
        cmd = NamedCommand("x")
        assert cmd.parse_int("7", console.context) == 7
        assert cmd.parse_int("seven", console.context, "count") is None
        assert ui.lines == ["[ERROR] Invalid count: 'seven'. Expected integer value."]


# ============================================================
# Dispatcher
# ============================================================

class TestDispatcher:
    """Tests for resolving and running single lines."""

    def test_echoes_input(self, console, ui):
        console.execute("say hi")
        assert ui.lines[0] == ">say hi"

    def test_runs_command_with_args(self, console, ui):
        console.execute('say "hello world" again')
        say = console.registry.lookup("say")
        assert say.calls == [["hello world", "again"]]
        assert ui.lines[-1] == "say: hello world again"

    def test_command_name_is_case_insensitive(self, console, ui):
        console.execute("SAY x")
        assert console.registry.lookup("say").calls == [["x"]]

    def test_blank_line_only_echoes(self, console, ui):
        console.execute("   ")
        assert ui.lines == [">   "]

    def test_unknown_command_keeps_original_case(self, console, ui):
        console.execute("Frobnicate now")
        assert ui.lines[-1] == "Unknown command: Frobnicate"

    def test_validation_failure_prints_usage(self, console, ui):
        console.execute("wait abc")
        assert "Invalid arguments for command 'wait'" in ui.lines
        assert ui.lines[-1].startswith("Usage: wait")
        assert not console.is_gated

    def test_execution_failure_is_reported(self, console, ui):
        console.execute("boom")
        assert ui.lines[-1] == "Error executing command 'boom': kaboom"

    def test_error_result_is_prefixed(self, console, ui):
        console.execute("help nosuchthing")
        assert ui.lines[-1] == "[ERROR] Unknown command: nosuchthing"

    def test_variable_round_trip(self, console, ui):
        console.variables.register("myvar")
        console.execute("myvar 5")
        console.execute("myvar")
        assert ui.lines[-1] == "myvar = 5"

    def test_variable_name_is_case_insensitive(self, console, ui):
        console.variables.register("sv.rate", "60")
        console.execute("SV.RATE")
        assert ui.lines[-1] == "sv.rate = 60"

    def test_variable_set_takes_literal_token(self, console):
        var = console.variables.register("greeting")
        console.execute('greeting "hi there"')
        assert var.value == "hi there"
        assert var.changed

    def test_variable_too_many_arguments(self, console, ui):
        var = console.variables.register("myvar", "1")
        console.execute("myvar 2 3")
        assert ui.lines[-1] == "Too many arguments"
        assert var.value == "1"

    def test_command_shadows_variable(self, console, ui):
        console.variables.register("say", "shadowed")
        console.execute("say")
        assert ui.lines[-1] == "say: "


# ============================================================
# Built-in commands
# ============================================================

class TestBuiltins:
    """Tests for help, vars and wait."""

    def test_help_lists_every_command(self, console, ui):
        console.execute("help")
        text = "\n".join(ui.lines)
        for name in ["help", "vars", "wait", "exec", "waitload", "spawn", "say"]:
            assert f"  {name}" in text

    def test_help_groups_by_category(self, console, ui):
        console.execute("help")
        headers = [line for line in ui.lines if line.startswith("---")]
        assert headers == ["--- General ---", "--- System ---",
                           "--- Scripting ---", "--- Development ---"]

    def test_help_for_one_command(self, console, ui):
        console.execute("help Spawn")
        assert "Command: spawn" in ui.lines
        assert "Category: Development" in ui.lines

    def test_help_rejects_two_arguments(self, console, ui):
        console.execute("help a b")
        assert "Invalid arguments for command 'help'" in ui.lines

    def test_vars_lists_sorted(self, console, ui):
        console.variables.register("zz.last", "1")
        console.variables.register("aa.first", "2")
        console.execute("vars")
        listed = [line.split("=")[0].strip() for line in ui.lines if " = " in line]
        assert listed == sorted(listed)
        assert "aa.first" in listed

    def test_vars_filter(self, console, ui):
        console.variables.register("sv.rate", "60")
        console.variables.register("cl.fov", "90")
        console.execute("vars SV")
        assert ui.lines[1] == "Variables matching 'SV':"
        assert any("sv.rate" in line for line in ui.lines)
        assert not any("cl.fov" in line for line in ui.lines)

    def test_vars_filter_no_match(self, console, ui):
        console.execute("vars nothing")
        assert ui.lines[-1] == "No variables found matching 'nothing'"

    def test_wait_sets_gate(self, console, ui):
        console.execute("wait 4")
        assert console.queue.gate.frames_remaining == 4
        assert ui.lines[-1] == "Waiting 4 frame(s)..."

    def test_wait_defaults_to_one_frame(self, console):
        console.execute("wait")
        assert console.queue.gate.frames_remaining == 1

    def test_wait_rejects_negative(self, console, ui):
        console.execute("wait -1")
        assert "Invalid arguments for command 'wait'" in ui.lines
        assert console.queue.gate.frames_remaining == 0

    def test_waitload_sets_load_gate(self, console):
        console.execute("waitload")
        assert console.queue.gate.waiting_for_load

    def test_builtin_instances_from_host_are_skipped(self, ui):
        console = create_console(ui, commands=[HelpCommand(), NamedCommand("say")])
        assert len(console.registry) == 5


# ============================================================
# Example command: spawn
# ============================================================

class TestSpawn:
    """Tests for the spawn example command."""

    def test_default_cube_at_origin(self, console, scene):
        console.execute("spawn")
        obj = scene.objects[0]
        assert obj.primitive == PrimitiveType.CUBE
        assert obj.position == Vector3(0, 0, 0)
        assert obj.color == Color.WHITE

    def test_type_and_position(self, console, scene, ui):
        console.execute("spawn cube 5 10 0")
        assert scene.objects[0].position == Vector3(5, 10, 0)
        assert ui.lines[-1].startswith("Created Cube 'Console_Cube_")

    def test_alias_and_color(self, console, scene):
        console.execute("spawn ball 0 5 0 Grey")
        obj = scene.objects[0]
        assert obj.primitive == PrimitiveType.SPHERE
        assert obj.color == Color.GRAY

    def test_unknown_type(self, console, scene, ui):
        console.execute("spawn triangle")
        assert ui.lines[-1].startswith("[ERROR] Unknown primitive type 'triangle'")
        assert scene.objects == []

    def test_bad_coordinates(self, console, scene, ui):
        console.execute("spawn cube a b c")
        assert ui.lines[-1].startswith("[ERROR] Invalid position coordinates")
        assert scene.objects == []

    def test_unknown_color(self, console, ui):
        console.execute("spawn cube 0 0 0 mauve")
        assert ui.lines[-1].startswith("[ERROR] Unknown color 'mauve'")

    def test_wrong_arg_count_fails_validation(self, console, scene, ui):
        console.execute("spawn cube 1 2")
        assert "Invalid arguments for command 'spawn'" in ui.lines
        assert scene.objects == []

    def test_removed_by_tag(self, console):
        assert console.registry.unregister_by_tag(1000) == 1
        assert "spawn" not in console.registry

    def test_details_describe_object(self, console, scene):
        result = console.registry.lookup("spawn").execute(
            ["capsule", "1", "2", "3", "cyan"], console.context)
        assert not result.is_error
        assert result.details["primitive"] == "Capsule"
        assert result.details["position"] == [1.0, 2.0, 3.0]
        assert result.details["color"] == "cyan"
