"""Tests for the schema scanner and comment filter."""

import pytest

from authzgen import Lexer, Token, TokenType, filter_comments, tokenize


def kinds(tokens: list[Token]) -> list[TokenType]:
    return [tok.type for tok in tokens]


class TestLexer:
    def test_empty_input(self):
        """Empty input produces only EOF."""
        tokens = tokenize("")
        assert tokens == [Token(TokenType.EOF, "", 1, 1)]

    def test_whitespace_only(self):
        tokens = tokenize("  \n\t \n ")
        assert kinds(tokens) == [TokenType.EOF]
        assert (tokens[0].line, tokens[0].column) == (3, 2)

    def test_keywords(self):
        tokens = tokenize("definition relation permission caveat")
        assert kinds(tokens) == [
            TokenType.DEFINITION,
            TokenType.RELATION,
            TokenType.PERMISSION,
            TokenType.CAVEAT,
            TokenType.EOF,
        ]
        assert [tok.column for tok in tokens[:4]] == [1, 12, 21, 32]

    def test_keywords_are_case_sensitive(self):
        tokens = tokenize("Definition RELATION")
        assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF]

    def test_identifier_with_path_separator(self):
        tokens = tokenize("namespace/platform/user")
        assert tokens[0] == Token(TokenType.IDENTIFIER, "namespace/platform/user", 1, 1)
        assert tokens[1].type == TokenType.EOF

    def test_identifier_characters(self):
        tokens = tokenize("private_forum foo123 _x 9lives")
        assert [tok.value for tok in tokens[:4]] == ["private_forum", "foo123", "_x", "9lives"]
        assert all(tok.type == TokenType.IDENTIFIER for tok in tokens[:4])

    @pytest.mark.parametrize(
        "literal,expected",
        [
            ("{", TokenType.LBRACE),
            ("}", TokenType.RBRACE),
            ("(", TokenType.LPAREN),
            (")", TokenType.RPAREN),
            (":", TokenType.COLON),
            ("|", TokenType.PIPE),
            ("&", TokenType.AMPERSAND),
            ("+", TokenType.PLUS),
            ("-", TokenType.MINUS),
            ("=", TokenType.EQUALS),
            ("->", TokenType.ARROW),
            (":*", TokenType.WILDCARD),
        ],
    )
    def test_single_symbol(self, literal, expected):
        """Each operator scans to exactly one token carrying its literal."""
        tokens = tokenize(f" {literal} ")
        assert len(tokens) == 2
        assert tokens[0] == Token(expected, literal, 1, 2)
        assert tokens[1].type == TokenType.EOF

    def test_symbol_positions(self):
        tokens = tokenize("/ { } : | + - = -> :* ( ) &")
        assert [(tok.type, tok.column) for tok in tokens[:-1]] == [
            (TokenType.ILLEGAL, 1),
            (TokenType.LBRACE, 3),
            (TokenType.RBRACE, 5),
            (TokenType.COLON, 7),
            (TokenType.PIPE, 9),
            (TokenType.PLUS, 11),
            (TokenType.MINUS, 13),
            (TokenType.EQUALS, 15),
            (TokenType.ARROW, 17),
            (TokenType.WILDCARD, 20),
            (TokenType.LPAREN, 23),
            (TokenType.RPAREN, 25),
            (TokenType.AMPERSAND, 27),
        ]

    def test_operators_without_spaces(self):
        tokens = tokenize("parent->view+owner")
        assert [(tok.type, tok.value) for tok in tokens] == [
            (TokenType.IDENTIFIER, "parent"),
            (TokenType.ARROW, "->"),
            (TokenType.IDENTIFIER, "view"),
            (TokenType.PLUS, "+"),
            (TokenType.IDENTIFIER, "owner"),
            (TokenType.EOF, ""),
        ]

    def test_wildcard_after_identifier(self):
        tokens = tokenize("user:*")
        assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.WILDCARD, TokenType.EOF]

    def test_line_comment(self):
        tokens = tokenize("// this is a comment\nidentifier")
        assert tokens[0] == Token(TokenType.COMMENT, "//", 1, 1)
        assert tokens[1] == Token(TokenType.IDENTIFIER, "identifier", 2, 1)

    def test_line_comment_at_end_of_input(self):
        tokens = tokenize("user // trailing")
        assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.COMMENT, TokenType.EOF]

    def test_block_comment(self):
        """The closing marker is part of the comment region."""
        tokens = tokenize("/* a\n b */ user")
        assert tokens[0] == Token(TokenType.COMMENT, "/*", 1, 1)
        assert tokens[1] == Token(TokenType.IDENTIFIER, "user", 2, 7)
        assert tokens[2].type == TokenType.EOF

    def test_unterminated_block_comment(self):
        tokens = tokenize("user /* never closed")
        assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.COMMENT, TokenType.EOF]

    def test_bare_slash_is_illegal(self):
        tokens = tokenize("/ user")
        assert tokens[0] == Token(TokenType.ILLEGAL, "/", 1, 1)
        assert tokens[1] == Token(TokenType.IDENTIFIER, "user", 1, 3)

    def test_illegal_characters_do_not_stop_scanning(self):
        tokens = tokenize("definition ! @ #")
        assert tokens[1:4] == [
            Token(TokenType.ILLEGAL, "!", 1, 12),
            Token(TokenType.ILLEGAL, "@", 1, 14),
            Token(TokenType.ILLEGAL, "#", 1, 16),
        ]
        assert tokens[4].type == TokenType.EOF

    def test_only_decimal_digits_continue_identifiers(self):
        tokens = tokenize("a² b①")
        assert tokens == [
            Token(TokenType.IDENTIFIER, "a", 1, 1),
            Token(TokenType.ILLEGAL, "²", 1, 2),
            Token(TokenType.IDENTIFIER, "b", 1, 4),
            Token(TokenType.ILLEGAL, "①", 1, 5),
            Token(TokenType.EOF, "", 1, 6),
        ]

    def test_non_ascii_decimal_digit_in_identifier(self):
        tokens = tokenize("x٣")
        assert tokens[0] == Token(TokenType.IDENTIFIER, "x٣", 1, 1)

    def test_multiple_lines(self):
        tokens = tokenize("definition name\n{\nrelation user\n}")
        assert [(tok.type, tok.line, tok.column) for tok in tokens] == [
            (TokenType.DEFINITION, 1, 1),
            (TokenType.IDENTIFIER, 1, 12),
            (TokenType.LBRACE, 2, 1),
            (TokenType.RELATION, 3, 1),
            (TokenType.IDENTIFIER, 3, 10),
            (TokenType.RBRACE, 4, 1),
            (TokenType.EOF, 4, 2),
        ]

    def test_complex_expression(self):
        source = (
            "definition user {\n"
            "  permission view = self + admin\n"
            "  relation admin: group/admin\n"
            "}"
        )
        tokens = tokenize(source)
        assert tokens[:-1] == [
            Token(TokenType.DEFINITION, "definition", 1, 1),
            Token(TokenType.IDENTIFIER, "user", 1, 12),
            Token(TokenType.LBRACE, "{", 1, 17),
            Token(TokenType.PERMISSION, "permission", 2, 3),
            Token(TokenType.IDENTIFIER, "view", 2, 14),
            Token(TokenType.EQUALS, "=", 2, 19),
            Token(TokenType.IDENTIFIER, "self", 2, 21),
            Token(TokenType.PLUS, "+", 2, 26),
            Token(TokenType.IDENTIFIER, "admin", 2, 28),
            Token(TokenType.RELATION, "relation", 3, 3),
            Token(TokenType.IDENTIFIER, "admin", 3, 12),
            Token(TokenType.COLON, ":", 3, 17),
            Token(TokenType.IDENTIFIER, "group/admin", 3, 19),
            Token(TokenType.RBRACE, "}", 4, 1),
        ]

    def test_tokenize_is_repeatable(self):
        lexer = Lexer("definition user {}")
        assert lexer.tokenize() == lexer.tokenize()

    def test_tokens_are_immutable(self):
        tok = tokenize("user")[0]
        with pytest.raises(AttributeError):
            tok.value = "other"


class TestFilterComments:
    def test_removes_only_comments(self):
        tokens = [
            Token(TokenType.DEFINITION, "definition", 1, 1),
            Token(TokenType.COMMENT, "//", 1, 12),
            Token(TokenType.IDENTIFIER, "user", 2, 1),
            Token(TokenType.COMMENT, "/*", 2, 6),
            Token(TokenType.LBRACE, "{", 3, 1),
        ]
        assert filter_comments(tokens) == [tokens[0], tokens[2], tokens[4]]

    def test_does_not_mutate_input(self):
        tokens = tokenize("// c\nuser")
        before = list(tokens)
        filter_comments(tokens)
        assert tokens == before

    def test_comment_erasure(self):
        """Filtering comments matches scanning the comment-free source."""
        with_comments = (
            "// header\n"
            "definition doc { /* inline */ relation owner: user // trailing\n"
            "  permission edit = owner }\n"
        )
        without_comments = (
            "\n"
            "definition doc {  relation owner: user \n"
            "  permission edit = owner }\n"
        )
        filtered = filter_comments(tokenize(with_comments))
        assert TokenType.COMMENT not in kinds(filtered)
        assert [(t.type, t.value) for t in filtered] == [
            (t.type, t.value) for t in tokenize(without_comments)
        ]
