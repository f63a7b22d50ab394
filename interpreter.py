import sys

from ast_nodes import Program, Block, Literal, Var, Binary, CastOn, Knit, Purl, Repeat, BindOff
from errors import KnitRuntimeError
from lexer import tokenize
from parser import Parser

INT64_MIN = -(2**63)
INT64_MOD = 2**64


def wrap_int64(value: int) -> int:
    # two's-complement wraparound into the signed 64-bit range
    return (value - INT64_MIN) % INT64_MOD + INT64_MIN


def div_int64(a: int, b: int) -> int:
    if b == 0:
        raise KnitRuntimeError("attempt to divide by zero")
    if a == INT64_MIN and b == -1:
        raise KnitRuntimeError("attempt to divide with overflow")
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return wrap_int64(quotient)


class Interpreter:
    """Tree-walking executor for parsed Knitlang statements.

    The environment (a ``dict`` of name -> int) is passed into every call
    rather than stored on the interpreter, so separate runs never share
    bindings unless the caller hands them the same dict.
    """

    def __init__(self, out=None, trace: bool = False):
        self.out = out
        self.trace_enabled = trace

    def _write(self, text: str):
        stream = self.out if self.out is not None else sys.stdout
        stream.write(text)

    # -------- expressions --------
    def evaluate(self, node, env) -> int:
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, Var):
            return env.get(node.name, 0)

        if isinstance(node, Binary):
            a = self.evaluate(node.left, env)
            b = self.evaluate(node.right, env)
            if node.op == "+":
                return wrap_int64(a + b)
            if node.op == "-":
                return wrap_int64(a - b)
            if node.op == "*":
                return wrap_int64(a * b)
            if node.op == "/":
                return div_int64(a, b)
            raise KnitRuntimeError(f"Unknown binary operator: {node.op}")

        raise KnitRuntimeError(f"Unknown expression node: {node.__class__.__name__}")

    # -------- statements --------
    def execute(self, node, env) -> bool:
        """Run one statement. Returns True when execution must stop (bind_off)."""
        if self.trace_enabled:
            self._write(f"TRACE {node!r}\n")

        if isinstance(node, (CastOn, Knit)):
            env[node.name] = self.evaluate(node.value, env)
            return False

        if isinstance(node, Purl):
            self._write(f"{self.evaluate(node.expr, env)}\n")
            return False

        if isinstance(node, Repeat):
            return self.execute_repeat(node, env)

        if isinstance(node, BindOff):
            return True

        raise KnitRuntimeError(f"Unknown statement node: {node.__class__.__name__}")

    def execute_repeat(self, node, env) -> bool:
        count = self.evaluate(node.count, env)
        for _ in range(max(count, 0)):
            if self.execute_block(node.body, env):
                return True
        return False

    def execute_block(self, block, env) -> bool:
        for stmt in block.statements:
            if self.execute(stmt, env):
                return True
        return False

    def run(self, program, env=None):
        """Execute a Program (or any statement sequence); returns the environment."""
        if env is None:
            env = {}
        statements = program.statements if isinstance(program, (Program, Block)) else program
        for stmt in statements:
            if self.execute(stmt, env):
                break
        return env


# -------- entry points used by the CLI and REPL --------

def parse_source(source):
    return Parser(tokenize(source)).parse()


def run(source, out=None, trace: bool = False):
    """Lex, parse and execute a whole program. Returns the final environment."""
    program = parse_source(source)
    return Interpreter(out=out, trace=trace).run(program)


def parse_one_statement(source):
    """Parse the first statement of ``source``; None when there is none."""
    return Parser(tokenize(source)).statement()


def execute_one(stmt, env, out=None, trace: bool = False) -> bool:
    return Interpreter(out=out, trace=trace).execute(stmt, env)
