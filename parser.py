from ast_nodes import Program, Block, Literal, Var, Binary, CastOn, Knit, Purl, Repeat, BindOff
from errors import KnitSyntaxError

MAX_NESTING_DEPTH = 100

TOKEN_TEXT = {
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "SEMI": "';'",
    "EQUAL": "'='",
    "IDENT": "identifier",
    "EOF": "end of input",
}


class Parser:
    def __init__(self, tokens):
        if not tokens or tokens[-1].type != "EOF":
            raise ValueError("token stream must end with EOF")
        self.tokens = tokens
        self.pos = 0
        self.current_token = tokens[0]
        self.block_depth = 0

    # move to next token; EOF is never passed
    def advance(self):
        if self.current_token.type != "EOF":
            self.pos += 1
            self.current_token = self.tokens[self.pos]

    # move to next token, but only if it matches what we expect
    def eat(self, token_type, context=""):
        tok = self.current_token
        if tok.type != token_type:
            expected = TOKEN_TEXT.get(token_type, token_type)
            self.error_here(f"Expected {expected}{context}, found {tok!r}")
        self.advance()
        return tok

    def error_here(self, message):
        raise KnitSyntaxError(message)

    # ---------- TOP LEVEL ----------
    def parse(self):
        statements = []
        while self.current_token.type != "EOF":
            statements.append(self.statement())
        return Program(statements)

    # ---------- STATEMENTS ----------
    def statement(self):
        """Parse one statement, or return None when the input is exhausted."""
        tok_type = self.current_token.type

        if tok_type == "CAST_ON":
            return self.binding_statement("CAST_ON", "cast_on", CastOn)
        if tok_type == "KNIT":
            return self.binding_statement("KNIT", "knit", Knit)

        if tok_type == "PURL":
            self.eat("PURL")
            expr = self.expr()
            self.eat("SEMI", " after purl statement")
            return Purl(expr)

        if tok_type == "REPEAT":
            return self.repeat_statement()

        if tok_type == "BIND_OFF":
            self.eat("BIND_OFF")
            self.eat("SEMI", " after bind_off")
            return BindOff()

        if tok_type == "EOF":
            return None

        self.error_here(f"Unknown statement start: {self.current_token!r}")

    # cast_on/knit IDENT = expr ;
    def binding_statement(self, keyword_type, keyword, node_class):
        self.eat(keyword_type)
        name = self.eat("IDENT", f" after {keyword}").value
        self.eat("EQUAL", f" after identifier in {keyword}")
        value = self.expr()
        self.eat("SEMI", f" after {keyword} statement")
        return node_class(name, value)

    # repeat expr { statement* }
    def repeat_statement(self):
        self.eat("REPEAT")
        count = self.expr()
        self.eat("LBRACE", " after repeat count")

        self.block_depth += 1
        if self.block_depth > MAX_NESTING_DEPTH:
            self.error_here(f"Max nesting depth exceeded ({MAX_NESTING_DEPTH})")

        statements = []
        while self.current_token.type not in ("RBRACE", "EOF"):
            statements.append(self.statement())

        self.eat("RBRACE", " after repeat body")
        self.block_depth -= 1
        return Repeat(count, Block(statements))

    # ---------- EXPRESSIONS ----------
    # expr -> term ((+|-) term)*
    def expr(self):
        node = self.term()
        while self.current_token.type in ("PLUS", "MINUS"):
            op = "+" if self.current_token.type == "PLUS" else "-"
            self.advance()
            node = Binary(node, op, self.term())
        return node

    # term -> atom ((*|/) atom)*
    def term(self):
        node = self.atom()
        while self.current_token.type in ("STAR", "SLASH"):
            op = "*" if self.current_token.type == "STAR" else "/"
            self.advance()
            node = Binary(node, op, self.atom())
        return node

    # atom -> NUMBER | IDENT
    def atom(self):
        tok = self.current_token
        if tok.type == "NUMBER":
            self.advance()
            return Literal(tok.value)
        if tok.type == "IDENT":
            self.advance()
            return Var(tok.value)
        self.error_here(f"Unexpected token in expression: {tok!r}")
