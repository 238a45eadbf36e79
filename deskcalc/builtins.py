BUILTIN_CONSTANTS: dict[str, float] = dict()


def register_builtin_constant(name: str, value: float) -> None:
    if name in BUILTIN_CONSTANTS:
        raise ValueError(f"Built-in constant {name!r} is already registered")
    BUILTIN_CONSTANTS[name] = value


# literal values, not math.pi / math.e
register_builtin_constant("pi", 3.1415926535)
register_builtin_constant("e", 2.7182818284)
