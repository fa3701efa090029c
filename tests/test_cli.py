"""
Command line runner tests

Tests running scripts through main(), the listing mode, settings and the
directive lexer used for highlighting.
"""

import pytest
from pygments.token import Name

from printexpr.__main__ import main
from printexpr.config import AppSettings
from printexpr.lib.lexer import DirectiveLexer


@pytest.fixture
def script(tmp_path):
    def write(source, name="job.py"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return write


class TestRun:
    """Running scripts"""

    def test_directives_to_stderr(self, script, capsys):
        path = script("x = 5\n#${ x }\nprint('done')\n")
        assert main([str(path)]) == 0
        captured = capsys.readouterr()
        assert captured.err == "line 2: x = 5;\n"
        assert captured.out == "done\n"

    def test_output_stdout(self, script, capsys):
        path = script("x = 5\n#${ x }\n")
        main(["-o", "stdout", str(path)])
        assert capsys.readouterr().out == "line 2: x = 5;\n"

    def test_script_arguments(self, script, capsys):
        path = script("import sys\n#@{ args: sys.argv[1:] }\n")
        main([str(path), "a", "-v"])
        assert capsys.readouterr().err == "args: sys.argv[1:] = ('a', '-v');\n"

    def test_runs_as_main(self, script, capsys):
        path = script("#${ __name__ }\n")
        main([str(path)])
        assert capsys.readouterr().err == "line 1: __name__ = '__main__';\n"

    def test_nofilter(self, script, capsys):
        path = script("x = 5\n#${ x }\n")
        main(["-n", str(path)])
        assert capsys.readouterr().err == ""

    def test_trace(self, script, capsys):
        path = script("x = 5\n#${ x }\n")
        main(["-d", str(path)])
        err = capsys.readouterr().err
        assert "# printexpr:" in err
        assert "__import__('printexpr').emit('$', 'line 2:', 'x', (x))" in err

    def test_module_hook(self, script, capsys):
        script("VALUE = 3\n#${ VALUE }\n", name="pe_cli_helper.py")
        path = script("import pe_cli_helper\n")
        main(["-m", "pe_cli_helper", str(path)])
        assert capsys.readouterr().err == "line 2: VALUE = 3;\n"

    def test_failure_propagates(self, script):
        path = script("#${ missing }\n")
        with pytest.raises(NameError):
            main([str(path)])

    def test_missing_script(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "absent.py")])
        assert excinfo.value.code == 1
        assert "Script not found" in capsys.readouterr().err

    def test_syntax_error_after_filtering(self, script, capsys):
        path = script("#${ ) }\n")
        with pytest.raises(SystemExit) as excinfo:
            main([str(path)])
        assert excinfo.value.code == 1
        assert "Syntax error" in capsys.readouterr().err


class TestList:
    """Listing directives"""

    def test_list(self, script, capsys):
        path = script("x = 1\n#${ x }\n# plain\n    #@{ lbl: [x] }\n")
        main(["-l", str(path)])
        out = capsys.readouterr().out.splitlines()
        assert out == [f"{path}:2: #${{ x }}", f"{path}:4: #@{{ lbl: [x] }}"]


class TestSettings:
    """Environment configuration"""

    def test_defaults(self, monkeypatch):
        for name in ("ENABLED", "TRACE", "OUTPUT", "MODULES"):
            monkeypatch.delenv(f"PRINTEXPR_{name}", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.enabled is True
        assert settings.trace is False
        assert settings.output == "stderr"
        assert settings.modules == []

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("PRINTEXPR_ENABLED", "false")
        monkeypatch.setenv("PRINTEXPR_MODULES", '["myapp", "tests.*"]')
        settings = AppSettings(_env_file=None)
        assert settings.enabled is False
        assert settings.modules == ["myapp", "tests.*"]


class TestLexer:
    """Directive highlighting"""

    def test_label_token(self):
        tokens = list(DirectiveLexer().get_tokens("#${ calc: len(a) * 2 }\n"))
        assert (Name.Label, "calc:") in tokens

    def test_expression_lexed_as_python(self):
        tokens = list(DirectiveLexer().get_tokens("#@{ len(items) }\n"))
        assert (Name.Builtin, "len") in tokens
