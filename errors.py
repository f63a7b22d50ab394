class KnitError(Exception):
    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def format(self, indent: str = "") -> str:
        return f"{indent}{self.kind}: {self.message}"

    def __str__(self) -> str:
        return self.format()


class KnitSyntaxError(KnitError):
    kind = "Syntax error"


class KnitRuntimeError(KnitError):
    kind = "Runtime error"
