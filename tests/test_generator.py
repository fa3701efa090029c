"""
Code generator tests

Tests the replacement statement text, direct execution of actions with an
evaluation backend, and the runtime emit() output format.
"""

import pytest

from printexpr.lib.generator import execute, generate
from printexpr.lib.matcher import match_line
from printexpr.lib.runtime import GenerationInvariantError, emit, output_format
from printexpr.models.directive import Directive


def action_for(line, line_number=1):
    return generate(match_line(line, line_number))


class TestGeneratedCode:
    """Text of the replacement statement"""

    def test_scalar(self):
        assert action_for("#${s}", 13).code == "__import__('printexpr').emit('$', 'line 13:', 's', (s))"

    def test_label_only(self):
        assert action_for("#${label_only:}", 5).code == "__import__('printexpr').emit('$', 'label_only:')"

    def test_label_and_expression_echoed(self):
        action = action_for("#@{ calc: a * 2 }")
        assert action.code == "__import__('printexpr').emit('@', 'calc:', 'a * 2', (a * 2))"

    def test_reference_list_collects_items(self):
        action = action_for("#\\{ a, b }")
        assert action.source == "[a, b]"
        assert action.code.endswith("'a, b', [a, b])")

    def test_indent_preserved(self):
        action = action_for("    #${ x }")
        assert action.line == "    " + action.code

    def test_single_line(self):
        action = action_for("#%{ {'a': 1} }")
        assert "\n" not in action.line

    @pytest.mark.parametrize("sigil", ["$", '"', "#", "@", "%", "\\"])
    def test_code_compiles(self, sigil):
        action = action_for(f"#{sigil}{{ tag: value }}")
        compile(action.code, "<generated>", "exec")

    def test_unknown_sigil_is_invariant_violation(self):
        directive = Directive(sigil="?", label=None, expression="x", line_number=1)
        with pytest.raises(GenerationInvariantError):
            generate(directive)


class TestActionExecution:
    """Running an OutputAction with an evaluation backend"""

    def test_scalar(self, sink):
        namespace = {"s": "a scalar"}
        action_for("#${s}", 13)(lambda source: eval(source, namespace))
        assert sink.getvalue() == "line 13: s = 'a scalar';\n"

    def test_list(self, sink):
        namespace = {"a": ["this", "is", "an", "array"]}
        action_for("#@{a}", 7)(lambda source: eval(source, namespace))
        assert sink.getvalue() == "line 7: a = ('this', 'is', 'an', 'array');\n"

    def test_label_only_needs_no_backend(self, sink):
        action_for("#${label_only:}")()
        assert sink.getvalue() == "label_only:\n"

    def test_expression_needs_backend(self, sink):
        with pytest.raises(ValueError):
            action_for("#${ x }")()

    def test_handle_override(self, sink):
        import io

        other = io.StringIO()
        action_for("##{ n }", 2)(lambda source: eval(source, {"n": "7"}), handle=other)
        assert other.getvalue() == "line 2: n = 7;\n"
        assert sink.getvalue() == ""

    def test_evaluation_failure_propagates(self, sink):
        with pytest.raises(NameError):
            action_for("#${ missing }")(lambda source: eval(source, {}))
        assert sink.getvalue() == ""


class TestEmit:
    """Runtime output format"""

    def test_scalar_line(self, sink):
        emit("$", "line 3:", "x", 1.5)
        assert sink.getvalue() == "line 3: x = 1.5;\n"

    def test_string_context(self, sink):
        emit('"', "lbl:", "n", 42)
        assert sink.getvalue() == "lbl: n = '42';\n"

    def test_reference_dump(self):
        text = output_format("\\", "line 4:", "a, h", [[1, 2], {"k": "v"}])
        assert text.split("\n") == ["line 4: a, h =", "_[0] = [1, 2];", "_[1] = {'k': 'v'};"]

    def test_unknown_sigil(self, sink):
        with pytest.raises(GenerationInvariantError):
            emit("!", "line 1:", "x", 1)

    def test_default_sink_is_stderr(self, capsys):
        emit("$", "line 1:", "x", 1)
        captured = capsys.readouterr()
        assert captured.err == "line 1: x = 1;\n"
        assert captured.out == ""

    def test_output_setting(self, capsys, monkeypatch):
        from printexpr.config import appsettings

        monkeypatch.setattr(appsettings, "output", "stdout")
        emit("$", "line 1:", "x", 1)
        assert capsys.readouterr().out == "line 1: x = 1;\n"


class TestExecute:
    """Direct execution in the caller's frame"""

    def test_locals_visible(self, sink):
        items = [1, 2]
        execute("#@{ items }")
        output = sink.getvalue()
        assert output.startswith("line ")
        assert output.endswith(": items = (1, 2);\n")

    def test_label(self, sink):
        total = 8
        execute("#${ calc: total }")
        assert sink.getvalue() == "calc: total = 8;\n"

    def test_not_a_directive(self, sink):
        with pytest.raises(ValueError):
            execute("print(1)")
