"""Builtin functions. The evaluator consults this table before the environment when resolving identifiers, and refuses
to bind a name that is already a builtin.

Arity is always checked first. push/append never modify their input; pop/removeLast remove from it in place.
"""

from simpleinterpreter.core.objects import (NULL, ArrayObject, BuiltinFunction, ErrorObject, IntegerObject, ObjectType,
                                            StringObject)


def arity_error(got, must):
    return ErrorObject(f"Unexpected number of arguments: got {got}, must be {must}")


def type_error(actual, *expected, which="argument"):
    expected = " or ".join(kind.name for kind in expected)
    return ErrorObject(f"Unexpected type of {which}: expected {expected}, got {actual.type.name}")


def _print(*args):
    if len(args) < 1:
        return arity_error(len(args), ">= 1")

    for arg in args:
        print(arg)
    return NULL


def _len(*args):
    if len(args) != 1:
        return arity_error(len(args), 1)

    arg, = args
    if isinstance(arg, ArrayObject):
        return IntegerObject(len(arg.elements))
    elif isinstance(arg, StringObject):
        return IntegerObject(len(arg.value))
    return type_error(arg, ObjectType.ARRAY, ObjectType.STRING)


def _first(null_on_empty):
    def first(*args):
        if len(args) != 1:
            return arity_error(len(args), 1)

        arg, = args
        if isinstance(arg, ArrayObject):
            if arg.elements:
                return arg.elements[0]
            return NULL if null_on_empty else ArrayObject([])
        elif isinstance(arg, StringObject):
            if arg.value:
                return StringObject(arg.value[0])
            return NULL if null_on_empty else StringObject("")
        return type_error(arg, ObjectType.ARRAY, ObjectType.STRING)

    return first


def _rest(null_on_empty):
    def rest(*args):
        if len(args) != 1:
            return arity_error(len(args), 1)

        arg, = args
        if isinstance(arg, ArrayObject):
            if arg.elements or not null_on_empty:
                return ArrayObject(arg.elements[1:])
            return NULL
        elif isinstance(arg, StringObject):
            if arg.value or not null_on_empty:
                return StringObject(arg.value[1:])
            return NULL
        return type_error(arg, ObjectType.ARRAY, ObjectType.STRING)

    return rest


def _text(obj):
    """Text used when obj is concatenated onto a string: the raw characters of a string, the rendering otherwise."""
    return obj.value if isinstance(obj, StringObject) else str(obj)


def _push(*args):
    if len(args) != 2:
        return arity_error(len(args), 2)

    container, element = args
    if isinstance(container, ArrayObject):
        return ArrayObject([element] + container.elements)
    elif isinstance(container, StringObject):
        return StringObject(_text(element) + container.value)
    return type_error(container, ObjectType.ARRAY, ObjectType.STRING, which="first argument")


def _append(*args):
    if len(args) != 2:
        return arity_error(len(args), 2)

    container, element = args
    if isinstance(container, ArrayObject):
        return ArrayObject(container.elements + [element])
    elif isinstance(container, StringObject):
        return StringObject(container.value + _text(element))
    return type_error(container, ObjectType.ARRAY, ObjectType.STRING, which="first argument")


def _pop(*args):
    if len(args) != 1:
        return arity_error(len(args), 1)

    container, = args
    if isinstance(container, ArrayObject):
        return container.elements.pop(0) if container.elements else NULL
    elif isinstance(container, StringObject):
        if not container.value:
            return NULL
        first, container.value = container.value[0], container.value[1:]
        return StringObject(first)
    return type_error(container, ObjectType.ARRAY, ObjectType.STRING, which="first argument")


def _remove_last(*args):
    if len(args) != 1:
        return arity_error(len(args), 1)

    container, = args
    if isinstance(container, ArrayObject):
        return container.elements.pop() if container.elements else NULL
    elif isinstance(container, StringObject):
        if not container.value:
            return NULL
        container.value, last = container.value[:-1], container.value[-1]
        return StringObject(last)
    return type_error(container, ObjectType.ARRAY, ObjectType.STRING, which="first argument")


def builtin_table(null_on_empty=True):
    """Returns the builtin table, name: BuiltinFunction. null_on_empty selects what first/rest return for an empty
    array or string: NULL, or an empty value of the same kind.
    """
    builtins = [
        BuiltinFunction("print", _print, "print(x -> any, ...) -> null: prints all parameters"),
        BuiltinFunction("len", _len, "len(x -> array|string) -> integer: returns the number of elements in 'x'"),
        BuiltinFunction("first", _first(null_on_empty),
                        "first(x -> array|string) -> any|string: returns the first element in 'x'"),
        BuiltinFunction("rest", _rest(null_on_empty),
                        "rest(x -> array|string) -> array|string: returns all the elements in 'x' excluded the first "
                        "element"),
        BuiltinFunction("push", _push,
                        "push(x -> array|string, y -> any) -> array|string: returns a new object with the new element "
                        "'y' added as first element of 'x'"),
        BuiltinFunction("append", _append,
                        "append(x -> array|string, y -> any) -> array|string: returns a new object with the new "
                        "element 'y' added as last element of 'x'"),
        BuiltinFunction("pop", _pop, "pop(x -> array|string) -> any|string: removes the first element from 'x' and "
                                     "returns it"),
        BuiltinFunction("removeLast", _remove_last,
                        "removeLast(x -> array|string) -> any|string: removes the last element from 'x' and returns "
                        "it"),
    ]
    return {builtin.name: builtin for builtin in builtins}
