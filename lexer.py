KEYWORDS = {
    "cast_on": "CAST_ON",
    "knit": "KNIT",
    "purl": "PURL",
    "bind_off": "BIND_OFF",
    "repeat": "REPEAT",
}

SINGLE_CHAR_TOKENS = {
    "{": "LBRACE",
    "}": "RBRACE",
    ";": "SEMI",
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "=": "EQUAL",
}

INT64_MAX = 2**63 - 1


class Token:
    # Produced once by the lexer and never modified afterwards.
    def __init__(self, type, value=None):
        self.type = type
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    def __hash__(self):
        return hash((self.type, self.value))

    def __repr__(self):
        if self.value is not None:
            return f"{self.type}({self.value})"
        return f"{self.type}"


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None

    def advance(self):
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def skip_whitespace(self):
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def read_identifier(self):
        result = ""
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char == "_"):
            result += self.current_char
            self.advance()

        keyword = KEYWORDS.get(result)
        if keyword is not None:
            return Token(keyword)
        return Token("IDENT", result)

    def read_number(self):
        result = ""
        while self.current_char is not None and self.current_char in "0123456789":
            result += self.current_char
            self.advance()

        # out-of-range literals read as 0
        value = int(result)
        if value > INT64_MAX:
            value = 0
        return Token("NUMBER", value)

    def get_next_token(self):
        while self.current_char is not None:

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            # identifiers / keywords (must start with an ASCII letter)
            if self.current_char.isascii() and self.current_char.isalpha():
                return self.read_identifier()

            if self.current_char in "0123456789":
                return self.read_number()

            token_type = SINGLE_CHAR_TOKENS.get(self.current_char)
            if token_type is not None:
                self.advance()
                return Token(token_type)

            # anything else is ignored
            self.advance()

        return Token("EOF")


def tokenize(text):
    """Lex the whole of ``text``. The result always ends with a single EOF token."""
    lexer = Lexer(text)
    tokens = []
    while True:
        tok = lexer.get_next_token()
        tokens.append(tok)
        if tok.type == "EOF":
            return tokens
