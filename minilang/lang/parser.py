"""Recursive descent parser for minilang. Turns the Lexer's tokens into an AST (see nodes.py) rooted at an implicit
Block.

Statement grammar:

```
<program>    ::= <statement>* EOF
<statement>  ::= "print" "(" <expr> ")" ";"
               | "{" <statement>* "}"
               | "if" <expr> <statement>* ["else" <statement>*] "end"
               | "while" <expr> <statement>* "end"
               | "for" <identifier> "in" "[" <expr> "," <expr> "]" <statement>* "end"
               | "function" <identifier> "(" [<identifier> ("," <identifier>)*] ")" <statement>* "end"
               | "return" [<expr>] ";"
               | <expr> ";"
```

Expression precedence, from lowest to highest:

```
assignment   =                  right-associative, target must be a variable
logical or   ||
logical and  &&
bitwise      &  |  ^            same level
equality     ==  !=
comparison   <  <=  >  >=
shift        <<  >>
term         +  -
factor       *  /  %
exponent     **                 right-associative
unary        !  -  ~
call         <expr> "(" [<expr> ("," <expr>)*] ")"
primary      literals, "(" <expr> ")", identifiers, "int" "(" <expr> ")", "float" "(" <expr> ")"
```

Syntax errors do not escape parse: each one is recorded in Parser.diagnostics (and handed to sink, if given), the parser
skips to the next statement boundary and keeps going. The malformed statement contributes no node to the tree.
"""

import math

from minilang.lang import nodes
from minilang.lang.error import ParseError
from minilang.lang.tokens import TokenKind


class Parser:
    """One method per non-terminal. Binary levels are driven by LEVELS so that each level only knows its operators."""

    # kind: node class, for every left-associative binary operator
    BINARY = {
        TokenKind.PIPE_PIPE: nodes.Or,
        TokenKind.AMPERSAND_AMPERSAND: nodes.And,
        TokenKind.AMPERSAND: nodes.BitAnd,
        TokenKind.PIPE: nodes.BitOr,
        TokenKind.CARET: nodes.BitXor,
        TokenKind.EQUAL_EQUAL: nodes.Equals,
        TokenKind.BANG_EQUAL: nodes.NotEquals,
        TokenKind.LESS: nodes.LessThan,
        TokenKind.LESS_EQUAL: nodes.LessEq,
        TokenKind.GREATER: nodes.GreaterThan,
        TokenKind.GREATER_EQUAL: nodes.GreaterEq,
        TokenKind.LESS_LESS: nodes.LeftShift,
        TokenKind.GREATER_GREATER: nodes.RightShift,
        TokenKind.PLUS: nodes.Add,
        TokenKind.MINUS: nodes.Subtract,
        TokenKind.STAR: nodes.Multiply,
        TokenKind.SLASH: nodes.Divide,
        TokenKind.PERCENT: nodes.Modulo,
    }

    # left-associative levels, lowest precedence first
    LEVELS = [
        (TokenKind.PIPE_PIPE,),
        (TokenKind.AMPERSAND_AMPERSAND,),
        (TokenKind.AMPERSAND, TokenKind.PIPE, TokenKind.CARET),
        (TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL),
        (TokenKind.LESS, TokenKind.LESS_EQUAL, TokenKind.GREATER, TokenKind.GREATER_EQUAL),
        (TokenKind.LESS_LESS, TokenKind.GREATER_GREATER),
        (TokenKind.PLUS, TokenKind.MINUS),
        (TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT),
    ]

    UNARY = {
        TokenKind.BANG: nodes.Not,
        TokenKind.MINUS: nodes.Negate,
        TokenKind.TILDE: nodes.BitNot,
    }

    CASTS = {
        TokenKind.INT: nodes.ToInt,
        TokenKind.FLOAT: nodes.ToFloat,
    }

    # tokens that begin a new statement, used when recovering from a syntax error
    STATEMENT_STARTS = (
        TokenKind.PRINT, TokenKind.LEFT_BRACE, TokenKind.IF, TokenKind.WHILE, TokenKind.FOR, TokenKind.FUNCTION
    )

    def __init__(self, tokens, sink=None):
        self.tokens = tokens
        self.sink = sink
        self.diagnostics = []
        self._current = 0

    def parse(self):
        """Parses a complete program and returns its root Block. Check self.diagnostics for syntax errors."""
        statements = []
        while not self.at_end:
            statements.append(self._declaration())
        return nodes.Block([stmt for stmt in statements if stmt is not None], self.tokens[0])

    # ----------------------------------------------------------------------------------------------------------------
    # statements

    def _declaration(self):
        """Parses a statement. On a syntax error, reports it, synchronizes and returns None."""
        try:
            return self._statement()
        except ParseError as error:
            self._synchronize()
            self._report(error)
            return None

    def _statement(self):
        if self._match(TokenKind.PRINT):
            return self._print_statement()
        elif self._match(TokenKind.LEFT_BRACE):
            return self._block_statement()
        elif self._match(TokenKind.IF):
            return self._if_statement()
        elif self._match(TokenKind.WHILE):
            return self._while_statement()
        elif self._match(TokenKind.FOR):
            return self._for_statement()
        elif self._match(TokenKind.FUNCTION):
            return self._function_statement()
        elif self._match(TokenKind.RETURN):
            return self._return_statement()
        return self._expression_statement()

    def _block_until(self, *terminators):
        """Parses statements into a Block until one of terminators (or EOF) is next."""
        token = self._peek()
        statements = []
        while not self._check(*terminators) and not self.at_end:
            statements.append(self._declaration())
        return nodes.Block([stmt for stmt in statements if stmt is not None], token)

    def _print_statement(self):
        print_token = self._previous()
        self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'print'.")
        expr = self._expression()
        self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression in print statement.")
        self._consume(TokenKind.SEMICOLON, "Expect ';' after print statement.")
        return nodes.Print(expr, print_token)

    def _block_statement(self):
        brace_token = self._previous()
        statements = []
        while not self._check(TokenKind.RIGHT_BRACE) and not self.at_end:
            statements.append(self._declaration())
        self._consume(TokenKind.RIGHT_BRACE, "Expect '}' after block.")
        return nodes.Block([stmt for stmt in statements if stmt is not None], brace_token)

    def _if_statement(self):
        if_token = self._previous()
        condition = self._expression()
        then_branch = self._block_until(TokenKind.ELSE, TokenKind.END)

        else_branch = None
        if self._match(TokenKind.ELSE):
            else_branch = self._block_until(TokenKind.END)

        self._consume(TokenKind.END, "Expect 'end' after if statement.")
        return nodes.If(condition, then_branch, else_branch, if_token)

    def _while_statement(self):
        while_token = self._previous()
        condition = self._expression()
        body = self._block_until(TokenKind.END)
        self._consume(TokenKind.END, "Expect 'end' after while loop.")
        return nodes.While(condition, body, while_token)

    def _for_statement(self):
        for_token = self._previous()
        name_token = self._consume(TokenKind.IDENTIFIER, "Expect loop variable name.")
        self._consume(TokenKind.IN, "Expect 'in' after loop variable.")

        self._consume(TokenKind.LEFT_BRACKET, "Expect '[' for range.")
        start = self._expression()
        self._consume(TokenKind.COMMA, "Expect ',' separating range values.")
        end = self._expression()
        self._consume(TokenKind.RIGHT_BRACKET, "Expect ']' to close range.")

        body = self._block_until(TokenKind.END)
        self._consume(TokenKind.END, "Expect 'end' after for loop.")
        return nodes.For(name_token.text, start, end, body, for_token)

    def _function_statement(self):
        function_token = self._previous()
        name_token = self._consume(TokenKind.IDENTIFIER, "Expect function name.")
        self._consume(TokenKind.LEFT_PAREN, "Expect '(' after function name.")

        params = []
        if not self._check(TokenKind.RIGHT_PAREN):
            params.append(self._consume(TokenKind.IDENTIFIER, "Expect parameter name.").text)
            while self._match(TokenKind.COMMA):
                params.append(self._consume(TokenKind.IDENTIFIER, "Expect parameter name.").text)
        self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after parameters.")

        body = self._block_until(TokenKind.END)
        self._consume(TokenKind.END, "Expect 'end' after function body.")
        return nodes.FunctionDef(name_token.text, params, body, function_token)

    def _return_statement(self):
        return_token = self._previous()
        expr = None if self._check(TokenKind.SEMICOLON) else self._expression()
        self._consume(TokenKind.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(expr, return_token)

    def _expression_statement(self):
        expr = self._expression()
        self._consume(TokenKind.SEMICOLON, "Expect ';' after expression.")
        return expr

    # ----------------------------------------------------------------------------------------------------------------
    # expressions

    def _expression(self):
        return self._assignment()

    def _assignment(self):
        expr = self._binary(0)

        if self._match(TokenKind.EQUAL):
            equals_token = self._previous()
            value = self._assignment()
            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value, equals_token)
            raise ParseError(equals_token, "Invalid assignment target.")

        return expr

    def _binary(self, level):
        """Parses left-associative binary operators of LEVELS[level], whose operands are the next level up."""
        if level == len(Parser.LEVELS):
            return self._exponent()

        expr = self._binary(level + 1)
        while self._match(*Parser.LEVELS[level]):
            op_token = self._previous()
            right = self._binary(level + 1)
            expr = Parser.BINARY[op_token.kind](expr, right, op_token)
        return expr

    def _exponent(self):
        expr = self._unary()
        if self._match(TokenKind.STAR_STAR):
            op_token = self._previous()
            return nodes.Exponent(expr, self._exponent(), op_token)
        return expr

    def _unary(self):
        if self._match(*Parser.UNARY):
            op_token = self._previous()
            return Parser.UNARY[op_token.kind](self._unary(), op_token)
        return self._call()

    def _call(self):
        expr = self._primary()
        while self._match(TokenKind.LEFT_PAREN):
            expr = self._finish_call(expr)
        return expr

    def _finish_call(self, callee):
        args = []
        if not self._check(TokenKind.RIGHT_PAREN):
            args.append(self._expression())
            while self._match(TokenKind.COMMA):
                args.append(self._expression())
        paren = self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, args, paren)

    def _primary(self):
        if self._match(TokenKind.FALSE):
            return nodes.BooleanPrimitive(False, self._previous())
        elif self._match(TokenKind.TRUE):
            return nodes.BooleanPrimitive(True, self._previous())
        elif self._match(TokenKind.NULL):
            return nodes.NullPrimitive(self._previous())
        elif self._match(TokenKind.INTEGER_LITERAL):
            return self._integer()
        elif self._match(TokenKind.FLOAT_LITERAL):
            return self._float()
        elif self._match(TokenKind.STRING_LITERAL):
            return nodes.StringPrimitive(self._previous().text, self._previous())
        elif self._match(TokenKind.IDENTIFIER):
            return nodes.Variable(self._previous().text, self._previous())
        elif self._match(*Parser.CASTS):
            return self._cast()
        elif self._match(TokenKind.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return expr

        raise ParseError(self._peek(), "Expect expression.")

    def _integer(self):
        token = self._previous()
        try:
            return nodes.IntegerPrimitive(int(token.text), token)
        except ValueError:  # longer than sys.get_int_max_str_digits()
            raise ParseError(token, "Integer literal too long.") from None

    def _float(self):
        token = self._previous()
        value = float(token.text)
        if math.isinf(value):
            raise ParseError(token, "Float literal out of range.")
        return nodes.FloatPrimitive(value, token)

    def _cast(self):
        cast_token = self._previous()
        self._consume(TokenKind.LEFT_PAREN, "Expect '(' after type cast keyword.")
        expr = self._expression()
        self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after cast expression.")
        return Parser.CASTS[cast_token.kind](expr, cast_token)

    # ----------------------------------------------------------------------------------------------------------------
    # primitives

    @property
    def at_end(self):
        return self._peek().kind is TokenKind.EOF

    def _peek(self):
        return self.tokens[self._current]

    def _previous(self):
        return self.tokens[self._current - 1]

    def _advance(self):
        if not self.at_end:
            self._current += 1
        return self._previous()

    def _check(self, *kinds):
        return not self.at_end and self._peek().kind in kinds

    def _match(self, *kinds):
        """Consumes the next token if it is one of kinds."""
        if self._check(*kinds):
            self._advance()
            return True
        return False

    def _consume(self, kind, expectation):
        if self._check(kind):
            return self._advance()
        raise ParseError(self._peek(), expectation)

    def _synchronize(self):
        """Skips tokens until just after a ';' or just before a token that starts a new statement. A token
        that starts a statement is never skipped.
        """
        if self._peek().kind in Parser.STATEMENT_STARTS:
            return
        self._advance()
        while not self.at_end:
            if self._previous().kind is TokenKind.SEMICOLON:
                return
            if self._peek().kind in Parser.STATEMENT_STARTS:
                return
            self._advance()

    def _report(self, error):
        self.diagnostics.append(error)
        if self.sink is not None:
            self.sink(error)
