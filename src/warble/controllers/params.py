"""Action parameters: the ordered names bound from captured path segments.

An action's positional parameters (after the first, which receives the
dispatch context) become path captures, in declaration order::

    def get_user(self, user_id): ...         # /user/user/:user_id
    def search(ctx, term, page: int): ...     # /search/:term/:page

The same ordered list is used at dispatch time to read the captured values
and pass them positionally, so path shape and argument binding cannot drift.

Parameters can also be declared explicitly, which takes precedence over the
signature and is validated against it once at startup::

    @params("slug")
    def show(self, *parts): ...
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from warble._errors import ConfigError

# Attribute set by @params on the decorated function
PARAMS_ATTR = "__warble_params__"

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class ActionParams:
    """Ordered parameter names with their converters.

    Attributes:
        names: Parameter names in declaration order.
        types: Converter per name (the parameter's annotation), or ``None``
            when the captured string is passed through unchanged.

    """

    names: tuple[str, ...] = ()
    types: tuple[Any, ...] = ()

    def bind(self, captured: dict[str, str]) -> list[Any]:
        """Read each captured value in declaration order and convert it."""
        args: list[Any] = []
        for name, converter in zip(self.names, self.types, strict=True):
            value = captured[name]
            if converter is not None:
                try:
                    value = converter(value)
                except (ValueError, TypeError):
                    pass
            args.append(value)
        return args


def params(*names: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare an action's path parameters explicitly.

    Usage::

        @params("year", "month")
        def get_archive(self, year: int, month: int): ...

    """
    for name in names:
        if not name.isidentifier():
            msg = f"Path parameter name {name!r} is not a valid identifier"
            raise ConfigError(msg)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, PARAMS_ATTR, tuple(names))
        return func

    return decorator


def extract_params(func: Callable[..., Any]) -> ActionParams:
    """Return the ordered path parameters of an action.

    Raises:
        ConfigError: If the action cannot receive the dispatch context, has a
            required keyword-only parameter, or an explicit declaration names
            a parameter the signature cannot accept.

    """
    qualname = getattr(func, "__qualname__", repr(func))
    try:
        sig = inspect.signature(func, eval_str=True)
    except (TypeError, ValueError, NameError) as exc:
        msg = f"Cannot inspect the signature of action {qualname}: {exc}"
        raise ConfigError(msg) from exc

    positional: list[inspect.Parameter] = []
    var_positional = False
    for param in sig.parameters.values():
        if param.kind in _POSITIONAL:
            positional.append(param)
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            var_positional = True
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is param.empty:
            msg = (
                f"Action {qualname} has a required keyword-only parameter "
                f"{param.name!r}, which cannot be bound from the path."
            )
            raise ConfigError(msg)

    if not positional and not var_positional:
        msg = (
            f"Action {qualname} must accept the dispatch context as its first "
            f"parameter (use 'def {getattr(func, '__name__', 'action')}(self, ...)')."
        )
        raise ConfigError(msg)

    # The first positional parameter receives the dispatch context
    bindable = {p.name: p for p in positional[1:]}

    declared = getattr(func, PARAMS_ATTR, None)
    if declared is None:
        names = tuple(bindable)
    else:
        _check_declared(qualname, declared, positional[1:], var_positional=var_positional)
        names = tuple(declared)

    types = tuple(_converter(bindable.get(name)) for name in names)
    return ActionParams(names=names, types=types)


def _check_declared(
    qualname: str,
    declared: tuple[str, ...],
    bindable: list[inspect.Parameter],
    *,
    var_positional: bool,
) -> None:
    """Values are passed positionally, so declared names must follow the signature."""
    for index, name in enumerate(declared):
        if index < len(bindable):
            if bindable[index].name != name:
                msg = (
                    f"Action {qualname} declares path parameter {name!r} at position "
                    f"{index}, where its signature has {bindable[index].name!r}."
                )
                raise ConfigError(msg)
        elif not var_positional:
            msg = (
                f"Action {qualname} declares path parameter {name!r} "
                f"but its signature does not accept it."
            )
            raise ConfigError(msg)

    for param in bindable[len(declared):]:
        if param.default is param.empty:
            msg = (
                f"Action {qualname} requires parameter {param.name!r}, "
                f"which is missing from its declared path parameters."
            )
            raise ConfigError(msg)


def _converter(param: inspect.Parameter | None) -> Any:
    if param is None or param.annotation is param.empty:
        return None
    if param.annotation is str or not callable(param.annotation):
        return None
    return param.annotation
