import os
import subprocess
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def run_repl_with_input(inp: str) -> str:
    cli = os.path.join(ROOT, "cli.py")

    proc = subprocess.run(
        [sys.executable, cli, "repl"],
        input=inp,
        text=True,
        capture_output=True,
        cwd=ROOT,
        timeout=10,
    )

    # REPL should exit cleanly after exit/:q/EOF
    if proc.returncode != 0:
        raise AssertionError(f"REPL exited with code {proc.returncode}\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}")

    return proc.stdout


def output_lines(out: str):
    # prompts are printed without a newline, so strip them from the captured text
    return out.replace("knit> ", "").replace("...> ", "").splitlines()


def test_banner_and_prompt():
    out = run_repl_with_input("exit\n")
    if "KNITLANG" not in out or "knit> " not in out:
        raise AssertionError(f"Expected banner and prompt.\nOUT:\n{out}")


def test_persistent_state_across_lines():
    out = run_repl_with_input("cast_on a = 5;\nknit a = a + 1;\npurl a;\n:q\n")
    if "6" not in output_lines(out):
        raise AssertionError(f"Expected 6 in output.\nOUT:\n{out}")


def test_session_ends_at_end_of_input():
    out = run_repl_with_input("purl 3 * 3;\n")
    if "9" not in output_lines(out):
        raise AssertionError(f"Expected 9 in output.\nOUT:\n{out}")


def test_error_is_reported_and_session_continues():
    out = run_repl_with_input("cast_on a = 2;\npurl 1 / 0;\ncast_on = 3;\npurl a;\nquit\n")
    lines = output_lines(out)
    if "Runtime error: attempt to divide by zero" not in lines:
        raise AssertionError(f"Expected runtime error message.\nOUT:\n{out}")
    if not any(line.startswith("Syntax error: Expected identifier") for line in lines):
        raise AssertionError(f"Expected syntax error message.\nOUT:\n{out}")
    if lines[-1] != "2":
        raise AssertionError(f"Expected the session to keep a = 2.\nOUT:\n{out}")


def test_failed_line_leaves_no_partial_bindings():
    out = run_repl_with_input("cast_on a = 1;\nrepeat 2 { knit a = a + 1; purl 1 / 0; }\npurl a;\n")
    lines = output_lines(out)
    if "1" not in lines or "2" in lines:
        raise AssertionError(f"Expected a to stay 1 after the failing line.\nOUT:\n{out}")


def test_multiline_block_is_buffered():
    out = run_repl_with_input("repeat 2 {\n  purl 7;\n}\n:q\n")
    lines = output_lines(out)
    if lines.count("7") != 2:
        raise AssertionError(f"Expected two 7 lines.\nOUT:\n{out}")
    if "...> " not in out:
        raise AssertionError(f"Expected a continuation prompt.\nOUT:\n{out}")


def test_bind_off_does_not_end_session():
    out = run_repl_with_input("bind_off;\npurl 4;\n")
    if "4" not in output_lines(out):
        raise AssertionError(f"Expected 4 in output.\nOUT:\n{out}")


if __name__ == "__main__":
    test_banner_and_prompt()
    test_persistent_state_across_lines()
    test_session_ends_at_end_of_input()
    test_error_is_reported_and_session_continues()
    test_failed_line_leaves_no_partial_bindings()
    test_multiline_block_is_buffered()
    test_bind_off_does_not_end_session()
    print("ok")
