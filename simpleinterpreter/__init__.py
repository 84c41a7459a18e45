"""Simple language interpreter.

A small dynamically-typed language with integers, booleans, strings, arrays, first-class functions and closures. Basic
program flow:
    1. Lexer: turns a source string into tokens, lazily (see core/lexer.py)
    2. Parser: builds an AST with recursive descent for statements and precedence climbing for expressions
        - For the grammar, see core/parser.py
    3. Evaluator: walks the AST, resolving names through a chain of environments (see core/evaluator.py)

The lang package drives the pipeline from a file or the interactive shell.
"""
