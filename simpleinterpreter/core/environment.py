"""Lexical environments: a chain of name -> value scopes ending at the global environment."""

from simpleinterpreter.core.objects import NULL


class Environment:
    """One scope. Function calls create an inner Environment chained to the environment the function captured, which
    is what makes closures work.
    """

    def __init__(self, outer=None):
        self.bindings = {}
        self.outer = outer

    def put(self, name, value):
        """Binds or rebinds name in this scope only."""
        self.bindings[name] = value

    def get(self, name):
        """Resolves name innermost scope first. Unbound names resolve to NULL, not an error."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.outer
        return NULL

    def __repr__(self):
        return f"Environment(names={sorted(self.bindings)}, outer={self.outer is not None})"
