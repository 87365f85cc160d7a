"""Lexical analysis for the nytric language. Turns source text into a flat list of Tokens, expanding IMP directives
in place as it goes.

Tokens are matched by trying each pattern of TOKEN_SPECS in order at the current position and keeping the first one
that matches, so order alone decides precedence:

```
<comment>    ::= "//" <char>* <newline>          ; dropped, produces no token
<import>     ::= "IMP" <space>+ '"' <path> '"'    ; replaced by the tokens of <path>, relative to this file
<keyword>    ::= "let" | "print" | "say" | "if" | "else" | "while" | "for" | "function" | "return"
               | "read" | "pause" | "wipe"
<builtin>    ::= "SQRT" | "RANDOM" | "REVERSE" | "LEN"
<number>     ::= [0-9]+ ("." [0-9]+)?              ; never signed: "-" is always subtraction
<string>     ::= '"' ... '"' | "'" ... "'"        ; backslash escapes
<identifier> ::= [A-Za-z_][A-Za-z0-9_]*
```

Keywords and builtins only match as whole words, so "letter" is an identifier.
"""

import os
import re
from dataclasses import dataclass

from nytric.lang.error import ErrorHandler, ImportFileError, LexError


_WORD_END = r"(?![A-Za-z0-9_])"

TOKEN_SPECS = [
    ("COMMENT", r"//.*(?:\n|$)"),
    ("EQUAL", r"=="),
    ("NOT_EQUAL", r"!="),
    ("IMPORT", r"IMP\s+\"([^\"]+)\""),
    ("LET", r"let" + _WORD_END),
    ("PRINT", r"print" + _WORD_END),
    ("SAY", r"say" + _WORD_END),
    ("IF", r"if" + _WORD_END),
    ("ELSE", r"else" + _WORD_END),
    ("WHILE", r"while" + _WORD_END),
    ("FOR", r"for" + _WORD_END),
    ("FUNCTION", r"function" + _WORD_END),
    ("RETURN", r"return" + _WORD_END),
    ("MINUS", r"-"),
    ("PLUS", r"\+"),
    ("MULTIPLY", r"\*"),
    ("DIVIDE", r"/"),
    ("ASSIGN", r"="),
    ("LBRACE", r"\{"),
    ("RBRACE", r"\}"),
    ("LPAREN", r"\("),
    ("RPAREN", r"\)"),
    ("COLON", r":"),
    ("COMMA", r","),
    ("NUMBER", r"[0-9]+(?:\.[0-9]+)?"),
    ("STRING", r"\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'"),
    ("SQRT", r"SQRT" + _WORD_END),
    ("RANDOM", r"RANDOM" + _WORD_END),
    ("REVERSE", r"REVERSE" + _WORD_END),
    ("LEN", r"LEN" + _WORD_END),
    ("READ", r"read" + _WORD_END),
    ("PAUSE", r"pause" + _WORD_END),
    ("WIPE", r"wipe" + _WORD_END),
    ("IDENTIFIER", r"[A-Za-z_][A-Za-z0-9_]*"),
]

EOF = "EOF"
WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Token:
    """A kind tag plus the exact text it was matched from."""
    kind: str
    lexeme: str

    def __repr__(self):
        return f"Token({self.kind}, {self.lexeme!r})"


def read_source(path):
    """Default file provider: returns the text at path, or None if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            return file.read()
    except (OSError, UnicodeDecodeError):
        return None


class Tokenizer:
    """Tokenizes one source string. included is the set of (case-folded) absolute paths already spliced into the
    token stream; it is shared with the Tokenizers of imported files.
    """
    PATTERNS = [(kind, re.compile(pattern)) for kind, pattern in TOKEN_SPECS]

    def __init__(self, source, base_dir=None, included=None, path=None, reader=read_source, error_handler=None):
        self.source = source
        self.base_dir = base_dir if base_dir is not None else os.getcwd()
        self.included = included if included is not None else set()
        self.reader = reader
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)

        if path is not None:
            self.included.add(Tokenizer.normalize(path))

    @staticmethod
    def normalize(path):
        """Key used in the inclusion set: absolute and case-insensitive."""
        return os.path.abspath(path).casefold()

    def tokenize(self):
        """Returns list of Tokens terminated by an EOF token. Raises LexError or ImportFileError."""
        tokens = []
        pos = 0

        while pos < len(self.source):
            for kind, pattern in Tokenizer.PATTERNS:
                match = pattern.match(self.source, pos)
                if match:
                    break
            else:
                whitespace = WHITESPACE.match(self.source, pos)
                if whitespace is None:
                    self._unexpected(pos)
                pos = whitespace.end()
                continue

            if kind == "IMPORT":
                tokens.extend(self._expand(match.group(1)))
            elif kind != "COMMENT":
                tokens.append(Token(kind, match.group(0)))
            pos = match.end()

        tokens.append(Token(EOF, ""))
        return tokens

    def _expand(self, file_name):
        """Returns the tokens of an imported file (without its EOF), or [] if it has been imported before."""
        full_path = os.path.abspath(os.path.join(self.base_dir, file_name))
        key = Tokenizer.normalize(full_path)

        if key in self.included:
            self.error_handler.warn("skipping already imported file '{}'", file_name, diagnosis=False)
            return []

        text = self.reader(full_path)
        if text is None:
            msg = "imported file '{}' not found or not readable"
            raise ImportFileError(msg, file_name, diagnosis=False, context=full_path)

        self.included.add(key)
        self.error_handler.register_file(full_path)

        inner = Tokenizer(text + "\n", os.path.dirname(full_path), self.included, reader=self.reader,
                          error_handler=self.error_handler)
        tokens = inner.tokenize()

        self.error_handler.remove_file(full_path)
        return [token for token in tokens if token.kind != EOF]

    def _unexpected(self, pos):
        """Raises LexError pointing at the character at pos within its line."""
        line_start = self.source.rfind("\n", 0, pos) + 1
        line_end = self.source.find("\n", pos)
        line = self.source[line_start:line_end if line_end != -1 else len(self.source)]

        col = pos - line_start
        line_num = self.source.count("\n", 0, pos) + 1

        msg = f"'{{}}' has unexpected character '{{}}' on line {line_num}"
        raise LexError(msg, (line, self.source[pos]), start=col, end=col + 1, context=self.source[pos])


def tokenize(source, base_dir=None, path=None, reader=read_source, error_handler=None):
    """Convenience wrapper around Tokenizer for a fresh inclusion set."""
    return Tokenizer(source, base_dir, path=path, reader=reader, error_handler=error_handler).tokenize()
