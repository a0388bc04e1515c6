"""
CLI Smoke Tests for icvm.

Every subcommand through main(argv), with program files in tmp_path.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import icvm

from test_engine import COMPARE_TO_8
from test_feedback import CHAIN_A, LOOP_A
from test_interactive import ARCADE, ECHO_LINE
from test_network import NIC


def write_program(tmp_path, program, name="prog.txt"):
    path = tmp_path / name
    path.write_text(",".join(str(v) for v in program) + "\n")
    return str(path)


class TestRun:

    def test_outputs(self, tmp_path, capsys):
        prog = write_program(tmp_path, COMPARE_TO_8)
        assert icvm.main(["run", prog, "-i", "8"]) == 0
        assert capsys.readouterr().out == "1000\n"

    def test_patch_and_default_peek(self, tmp_path, capsys):
        prog = write_program(tmp_path, [1, 0, 0, 0, 99])
        assert icvm.main(["run", prog, "--patch", "1=4"]) == 0
        assert capsys.readouterr().out == "mem[0] = 100\n"

    def test_profile(self, tmp_path, capsys):
        prog = write_program(tmp_path, [3, 0, 4, 0, 99])
        assert icvm.main(["run", prog, "--profile", "diagnostic", "--profile", "thermal"]) == 0
        assert capsys.readouterr().out == "diagnostic: 1\nthermal: 5\n"

    def test_failed_part_does_not_stop_the_next(self, tmp_path, capsys):
        prog = write_program(tmp_path, [3, 0, 4, 0, 99])
        assert icvm.main(["run", prog, "--profile", "plain", "--profile", "boost"]) == 1
        captured = capsys.readouterr()
        assert captured.out == "boost: 2\n"
        assert "plain: Program failed" in captured.err

    def test_trace(self, tmp_path, capsys):
        prog = write_program(tmp_path, [104, 7, 99])
        assert icvm.main(["run", prog, "--trace"]) == 0
        captured = capsys.readouterr()
        assert captured.out == "7\n"
        assert "OUT" in captured.err

    def test_fault(self, tmp_path, capsys):
        prog = write_program(tmp_path, [42])
        assert icvm.main(["run", prog]) == 1
        assert "Program failed" in capsys.readouterr().err


class TestLoading:

    def test_missing_file(self, tmp_path, capsys):
        assert icvm.main(["run", str(tmp_path / "nope.txt")]) == 1
        assert "Cannot read program" in capsys.readouterr().err

    def test_bad_text(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_text("1,two,3")
        assert icvm.main(["disasm", str(path)]) == 1
        assert "Field 1" in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert icvm.main([]) == 0
        assert "commands:" in capsys.readouterr().out


class TestCommands:

    def test_amplify(self, tmp_path, capsys):
        prog = write_program(tmp_path, CHAIN_A)
        assert icvm.main(["amplify", prog]) == 0
        assert capsys.readouterr().out == "chain: 43210\n"

    def test_amplify_feedback(self, tmp_path, capsys):
        prog = write_program(tmp_path, LOOP_A)
        assert icvm.main(["amplify", prog, "--feedback", "--phases", "5-9"]) == 0
        assert capsys.readouterr().out == "feedback: 139629729\n"

    def test_amplify_both_reports_each_part(self, tmp_path, capsys):
        prog = write_program(tmp_path, CHAIN_A)
        assert icvm.main(["amplify", prog, "--both"]) == 0
        out = capsys.readouterr().out
        assert "chain: 43210" in out
        assert "feedback: " in out

    def test_amplify_failure(self, tmp_path, capsys):
        prog = write_program(tmp_path, [42])
        assert icvm.main(["amplify", prog]) == 1
        assert "Program failed" in capsys.readouterr().err

    def test_network(self, tmp_path, capsys):
        prog = write_program(tmp_path, NIC)
        assert icvm.main(["network", prog, "--size", "4"]) == 0
        out = capsys.readouterr().out
        assert "first monitor packet: x=5 y=3" in out
        assert "repeated packet: x=5 y=10" in out

    def test_ascii_script(self, tmp_path, capsys):
        prog = write_program(tmp_path, ECHO_LINE)
        script = tmp_path / "script.txt"
        script.write_text("hey\n")
        assert icvm.main(["ascii", prog, "--script", str(script)]) == 0
        assert capsys.readouterr().out == "hey\nresult: 1000\n"

    def test_arcade(self, tmp_path, capsys):
        prog = write_program(tmp_path, ARCADE)
        assert icvm.main(["arcade", prog]) == 0
        assert capsys.readouterr().out == "blocks: 2\n"

    def test_disasm(self, tmp_path, capsys):
        prog = write_program(tmp_path, [1002, 4, 3, 4, 33])
        assert icvm.main(["disasm", prog]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].endswith("MUL [4], #3, [4]")
        assert lines[1].endswith("DATA 33")

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            icvm.main(["--version"])
        assert exc.value.code == 0
        assert "icvm" in capsys.readouterr().out
