"""Scanner for the Lox language.

Turns raw source text into a flat list of tokens in a single left-to-right
pass. Two cursors are kept: `start` marks the first character of the lexeme
being scanned and `current` the next character to consume.

Lexical errors (unexpected characters, unterminated strings, malformed
numbers) are reported as they are found and scanning carries on with the
next lexeme, so one run can surface several problems at once. The token list
always ends with exactly one EOF token.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from .errors import ErrorReporter, ScanError
from .tokens import KEYWORDS, Token, TokenType


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# operator -> (type when followed by '=', type otherwise)
ONE_OR_TWO_CHAR_TOKENS = {
    '!': (TokenType.BANG_EQUAL, TokenType.BANG),
    '=': (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    '<': (TokenType.LESS_EQUAL, TokenType.LESS),
    '>': (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> Tuple[List[Token], bool]:
        had_errors = False
        while not self.is_at_end():
            # beginning of the next lexeme
            self.start = self.current
            try:
                self.scan_token()
            except ScanError as err:
                self.reporter.scan_error(err)
                had_errors = True
        self.tokens.append(Token(TokenType.EOF, '', None, self.line))
        return self.tokens, had_errors

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
            return
        if c in ONE_OR_TWO_CHAR_TOKENS:
            with_equal, alone = ONE_OR_TWO_CHAR_TOKENS[c]
            self.add_token(with_equal if self.match('=') else alone)
            return
        if c == '/':
            if self.match('/'):
                # a comment runs to the end of the line
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
            return
        if c in (' ', '\r', '\t'):
            return
        if c == '\n':
            self.line += 1
            return
        if c == '"':
            self.string()
            return
        if is_digit(c):
            self.number()
            return
        if is_alpha(c):
            self.identifier()
            return
        raise ScanError(self.line, f"unexpected character {c}")

    def string(self):
        start_line = self.line
        while self.peek() != '"' and not self.is_at_end():
            # strings may span lines
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            raise ScanError(start_line, "unterminated string")
        self.advance()  # closing quote
        value = self.source[self.start + 1:self.current - 1]
        self.add_token(TokenType.STRING, value)

    def number(self):
        while is_digit(self.peek()):
            self.advance()
        # a '.' only belongs to the number when a digit follows it
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        text = self.source[self.start:self.current]
        try:
            value = float(text)
        except ValueError:
            raise ScanError(self.line, "unable to parse number")
        self.add_token(TokenType.NUMBER, value)

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    # Cursor helpers

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def add_token(self, token_type: TokenType, literal: Any = None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, literal, self.line))


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> Tuple[List[Token], bool]:
    """Scan `source` into tokens, returning them with a had-errors flag."""
    return Scanner(source, reporter).scan_tokens()
