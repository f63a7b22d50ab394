import os
import sys
import traceback

import colorama

from errors import KnitError
from interpreter import Interpreter, parse_source, parse_one_statement, execute_one
from lexer import tokenize

PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))

USAGE = """Usage:
  python cli.py run <file.knit>
  python cli.py <file.knit>
  python cli.py example <name>
  python cli.py --example <name>
  python cli.py parse <file.knit>
  python cli.py tokens <file.knit>
  python cli.py repl   (or -r/--repl, or no arguments)
  (optional) --debug to show Python traceback
  (optional) --trace to print each statement as it runs"""


# Simple AST printer (so you can SEE what the parser built)
def ast_to_dict(node):
    if node is None:
        return None

    t = node.__class__.__name__
    d = {"type": t}

    if t in ("Program", "Block"):
        d["statements"] = [ast_to_dict(s) for s in node.statements]
    elif t in ("CastOn", "Knit"):
        d["name"] = node.name
        d["value"] = ast_to_dict(node.value)
    elif t == "Purl":
        d["expr"] = ast_to_dict(node.expr)
    elif t == "Repeat":
        d["count"] = ast_to_dict(node.count)
        d["body"] = ast_to_dict(node.body)
    elif t == "BindOff":
        pass
    elif t == "Literal":
        d["value"] = node.value
    elif t == "Var":
        d["name"] = node.name
    elif t == "Binary":
        d["op"] = node.op
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    else:
        d["raw"] = str(node)

    return d


def pretty(obj, indent=0):
    sp = "  " * indent
    if isinstance(obj, dict):
        lines = []
        for k, v in obj.items():
            if isinstance(v, (dict, list)):
                lines.append(f"{sp}{k}:")
                lines.append(pretty(v, indent + 1))
            else:
                lines.append(f"{sp}{k}: {v}")
        return "\n".join(lines)
    if isinstance(obj, list):
        lines = []
        for item in obj:
            lines.append(f"{sp}-")
            lines.append(pretty(item, indent + 1))
        return "\n".join(lines)
    return f"{sp}{obj}"


def report_error(e, debug: bool = False):
    if debug:
        traceback.print_exc()
        return
    message = str(e)
    if sys.stdout.isatty():
        message = f"{colorama.Fore.RED}{message}{colorama.Style.RESET_ALL}"
    print(message)


def read_source(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_parse(path, debug: bool = False):
    try:
        program = parse_source(read_source(path))
    except (KnitError, OSError) as e:
        report_error(e, debug=debug)
        sys.exit(1)

    print(pretty(ast_to_dict(program)))


def cmd_tokens(path, debug: bool = False):
    try:
        tokens = tokenize(read_source(path))
    except OSError as e:
        report_error(e, debug=debug)
        sys.exit(1)

    for i, tok in enumerate(tokens):
        print(f"  {i:04d}  {tok!r}")


def cmd_run(path, debug: bool = False, trace: bool = False):
    try:
        program = parse_source(read_source(path))
        Interpreter(trace=trace).run(program)
    except (KnitError, OSError) as e:
        sys.stdout.flush()
        report_error(e, debug=debug)
        sys.exit(1)


def resolve_example_path(name: str) -> str:
    rel = os.path.join("examples", f"{name}.knit")

    # Prefer the examples folder of the current directory.
    candidate = os.path.abspath(rel)
    if os.path.exists(candidate):
        return candidate

    # Fallback: the examples shipped next to this file.
    return os.path.join(PROJECT_DIR, rel)


def cmd_example(name, debug: bool = False, trace: bool = False):
    path = resolve_example_path(name)
    if not os.path.exists(path):
        print(f"Example not found: {name}")
        sys.exit(1)
    cmd_run(path, debug=debug, trace=trace)


def _count_braces_delta(line: str) -> int:
    # Minimal brace balancer for REPL multiline input.
    delta = 0
    for ch in line:
        if ch == "{":
            delta += 1
        elif ch == "}":
            delta -= 1
    return delta


def cmd_repl(debug: bool = False, trace: bool = False):
    # One environment for the whole session.
    env = {}

    print("KNITLANG - type 'exit' to quit.")

    buffer_lines = []
    brace_depth = 0
    while True:
        prompt = "knit> " if not buffer_lines else "...> "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not buffer_lines and stripped in (":q", ":quit", "quit", "exit"):
            break

        if not stripped and not buffer_lines:
            continue

        buffer_lines.append(line)
        brace_depth += _count_braces_delta(line)

        # Wait for block completion if braces aren't balanced yet.
        if brace_depth > 0:
            continue

        source = "\n".join(buffer_lines)
        buffer_lines = []
        brace_depth = 0

        try:
            stmt = parse_one_statement(source)
            if stmt is None:
                continue

            # Run against a copy so a failing line leaves no partial bindings.
            working = dict(env)
            execute_one(stmt, working, trace=trace)
            env = working
        except KnitError as e:
            sys.stdout.flush()
            report_error(e, debug=debug)


def main():
    colorama.just_fix_windows_console()

    debug = False
    if "--debug" in sys.argv:
        debug = True
        sys.argv.remove("--debug")

    trace = False
    if "--trace" in sys.argv:
        trace = True
        sys.argv.remove("--trace")

    # -r/--repl: without a file the REPL runs anyway
    for flag in ("-r", "--repl"):
        while flag in sys.argv:
            sys.argv.remove(flag)

    # --example <name> takes precedence over any file argument
    if "--example" in sys.argv:
        i = sys.argv.index("--example")
        if i + 1 >= len(sys.argv):
            print(USAGE)
            sys.exit(1)
        name = sys.argv[i + 1]
        cmd_example(name, debug=debug, trace=trace)
        return

    if len(sys.argv) < 2:
        cmd_repl(debug=debug, trace=trace)
        return

    cmd = sys.argv[1]

    if cmd == "repl":
        if len(sys.argv) != 2:
            print(USAGE)
            sys.exit(1)
        cmd_repl(debug=debug, trace=trace)
        return

    if cmd not in ("run", "example", "parse", "tokens"):
        # bare file path
        if len(sys.argv) != 2:
            print(USAGE)
            sys.exit(1)
        cmd_run(cmd, debug=debug, trace=trace)
        return

    if len(sys.argv) != 3:
        print(USAGE)
        sys.exit(1)

    arg = sys.argv[2]

    if cmd == "run":
        cmd_run(arg, debug=debug, trace=trace)
    elif cmd == "example":
        cmd_example(arg, debug=debug, trace=trace)
    elif cmd == "parse":
        cmd_parse(arg, debug=debug)
    else:
        cmd_tokens(arg, debug=debug)


if __name__ == "__main__":
    main()
