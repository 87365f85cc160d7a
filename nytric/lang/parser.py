"""Recursive-descent parser for the nytric language. All grammar can be loosely defined as follows:

```
<program>   ::= <stmt>* EOF
<stmt>      ::= "let" <identifier> "=" <expr>
              | ("print" | "say") <expr>
              | "if" <expr> <body> ("else" <body>)?
              | "while" <expr> <body>
              | "for" <identifier> "=" <expr> <expr> <body>   ; inclusive, ascending by one
              | "function" <identifier> "(" <identifier>* ")" <block>   ; commas optional
              | "return" <expr>
              | "pause" <expr>
              | "wipe"
              | <expr>                                  ; printed implicitly
<body>      ::= <block> | <stmt>
<block>     ::= "{" <stmt>* "}"

<expr>      ::= ("SQRT" | "RANDOM" | "REVERSE" | "LEN") <expr>
              | ("==" | "!=" | "+" | "-" | "*" | "/") <expr> <expr>
              | <identifier> <expr>{n}                  ; call if declared with n params, else a variable
              | <number> | <string> | "read" | "pause" <expr> | "wipe"
```

Everything is prefix, so no precedence rules or parentheses are ever needed. The only thing the grammar cannot tell
on its own is how many arguments a call takes, which is why the parser pre-scans the whole token list for function
declarations before parsing anything.
"""

from nytric.lang import syntax
from nytric.lang.error import ParseError
from nytric.lang.lexical import EOF


UNARY = {"SQRT", "RANDOM", "REVERSE", "LEN"}
COMPARISON = {"EQUAL", "NOT_EQUAL"}
MATH = {"PLUS", "MINUS", "MULTIPLY", "DIVIDE"}


class Parser:
    """Parses one token list into a syntax.Program. arities maps every function name declared anywhere in the tokens
    to its number of parameters.
    """

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0
        self.arities = Parser.prescan(tokens)

    @staticmethod
    def prescan(tokens):
        """Returns dict of function name: param count for every `function <name> (` in tokens, regardless of nesting.
        Counts identifiers up to the closing parenthesis and skips anything else.
        """
        arities = {}
        idx = 0
        while idx < len(tokens):
            if tokens[idx].kind == "FUNCTION" and idx + 1 < len(tokens) and tokens[idx + 1].kind == "IDENTIFIER":
                name = tokens[idx + 1].lexeme
                idx += 2
                if idx < len(tokens) and tokens[idx].kind == "LPAREN":
                    idx += 1
                    count = 0
                    while idx < len(tokens) and tokens[idx].kind != "RPAREN":
                        if tokens[idx].kind == "IDENTIFIER":
                            count += 1
                        idx += 1
                    arities[name] = count
            idx += 1
        return arities

    def peek(self):
        return self.tokens[self.pos]

    def consume(self, expected):
        """Consumes and returns the next token, which must be of kind expected."""
        token = self.peek()
        if token.kind != expected:
            raise ParseError("expected {} but got {}", (expected, token.kind), context=token)
        self.pos += 1
        return token

    def parse(self):
        body = []
        while self.peek().kind != EOF:
            body.append(self.parse_statement())
        return syntax.Program(tuple(body))

    def parse_statement(self):
        kind = self.peek().kind

        if kind == "LET":
            return self.parse_var_decl()
        elif kind in ("PRINT", "SAY"):
            return self.parse_print()
        elif kind == "IF":
            return self.parse_if()
        elif kind == "WHILE":
            return self.parse_while()
        elif kind == "FOR":
            return self.parse_for()
        elif kind == "FUNCTION":
            return self.parse_function()
        elif kind == "RETURN":
            self.consume("RETURN")
            return syntax.Return(self.parse_expression())
        elif kind in ("PAUSE", "WIPE"):
            return self.parse_expression()

        return syntax.Print(self.parse_expression(), "implicit")

    def parse_var_decl(self):
        self.consume("LET")
        name = self.consume("IDENTIFIER").lexeme
        self.consume("ASSIGN")
        return syntax.VarDecl(name, self.parse_expression())

    def parse_print(self):
        keyword = self.consume(self.peek().kind)
        return syntax.Print(self.parse_expression(), keyword.lexeme)

    def parse_body(self):
        """A brace block, or a single statement standing in for one."""
        if self.peek().kind == "LBRACE":
            return self.parse_block()
        return (self.parse_statement(), )

    def parse_block(self):
        self.consume("LBRACE")
        stmts = []
        while self.peek().kind != "RBRACE":
            stmts.append(self.parse_statement())
        self.consume("RBRACE")
        return tuple(stmts)

    def parse_if(self):
        self.consume("IF")
        cond = self.parse_expression()
        then_body = self.parse_body()

        else_body = None
        if self.peek().kind == "ELSE":
            self.consume("ELSE")
            else_body = self.parse_body()

        return syntax.If(cond, then_body, else_body)

    def parse_while(self):
        self.consume("WHILE")
        cond = self.parse_expression()
        return syntax.While(cond, self.parse_body())

    def parse_for(self):
        self.consume("FOR")
        var_name = self.consume("IDENTIFIER").lexeme
        self.consume("ASSIGN")
        start = self.parse_expression()
        end = self.parse_expression()
        return syntax.For(var_name, start, end, self.parse_body())

    def parse_function(self):
        self.consume("FUNCTION")
        name = self.consume("IDENTIFIER").lexeme
        self.consume("LPAREN")

        params = []
        while self.peek().kind != "RPAREN":
            params.append(self.consume("IDENTIFIER").lexeme)
            if self.peek().kind == "COMMA":
                self.consume("COMMA")
        self.consume("RPAREN")

        return syntax.FunctionDecl(name, tuple(params), self.parse_block())

    def parse_expression(self):
        token = self.peek()
        kind = token.kind

        if kind in UNARY:
            self.consume(kind)
            return syntax.Unary(token.lexeme, self.parse_expression())

        elif kind in COMPARISON or kind in MATH:
            self.consume(kind)
            left = self.parse_expression()
            right = self.parse_expression()
            if kind in COMPARISON:
                return syntax.Comparison(token.lexeme, left, right)
            return syntax.BinaryMath(token.lexeme, left, right)

        elif kind == "IDENTIFIER":
            self.consume(kind)
            if token.lexeme in self.arities:
                args = tuple(self.parse_expression() for __ in range(self.arities[token.lexeme]))
                return syntax.Call(token.lexeme, args)
            return syntax.Variable(token.lexeme)

        elif kind == "NUMBER":
            self.consume(kind)
            return syntax.Literal(float(token.lexeme))

        elif kind == "STRING":
            self.consume(kind)
            return syntax.Literal(Parser.unescape(token.lexeme[1:-1]))

        elif kind == "READ":
            self.consume(kind)
            return syntax.Read()

        elif kind == "PAUSE":
            self.consume(kind)
            return syntax.Pause(self.parse_expression())

        elif kind == "WIPE":
            self.consume(kind)
            return syntax.Wipe()

        raise ParseError("unexpected token {}", token.kind, context=token)

    @staticmethod
    def unescape(text):
        """Resolves \\", \\' and \\\\ in a string literal body. Any other backslash is kept as is."""
        return text.replace("\\\"", "\"").replace("\\'", "'").replace("\\\\", "\\")


def parse(tokens):
    return Parser(tokens).parse()
