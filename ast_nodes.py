class ASTNode:
    # Attribute names that make up the node, in order. Used for equality and dumps.
    fields: tuple = ()

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self.fields)

    def __repr__(self):
        args = ", ".join(repr(getattr(self, f)) for f in self.fields)
        return f"{self.__class__.__name__}({args})"


class Program(ASTNode):
    fields = ("statements",)

    def __init__(self, statements):
        self.statements = tuple(statements)


class Block(ASTNode):
    fields = ("statements",)

    def __init__(self, statements):
        self.statements = tuple(statements)


# ---------- expressions ----------

class Literal(ASTNode):
    fields = ("value",)

    def __init__(self, value):
        self.value = value


class Var(ASTNode):
    fields = ("name",)

    def __init__(self, name):
        self.name = name


class Binary(ASTNode):
    fields = ("left", "op", "right")

    def __init__(self, left, op, right):
        self.left = left
        self.op = op      # one of + - * /
        self.right = right


# ---------- statements ----------

class CastOn(ASTNode):
    fields = ("name", "value")

    def __init__(self, name, value):
        self.name = name
        self.value = value  # expression


class Knit(ASTNode):
    fields = ("name", "value")

    def __init__(self, name, value):
        self.name = name
        self.value = value  # expression


class Purl(ASTNode):
    fields = ("expr",)

    def __init__(self, expr):
        self.expr = expr


class Repeat(ASTNode):
    fields = ("count", "body")

    def __init__(self, count, body):
        self.count = count  # evaluated once, before the first pass
        self.body = body    # Block


class BindOff(ASTNode):
    pass
