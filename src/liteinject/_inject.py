from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Sequence

    T = TypeVar("T")

    InjectionMap = Mapping[Hashable, Any]


# Attributes owned by the decorated class itself; never overwritten by hoisting.
DECORATOR_ATTRIBUTES = frozenset({"injection_map", "wrapped_class", "with_dependencies"})


@dataclass(frozen=True)
class Value:
    """Concrete dependency, injected as is even when it is callable."""

    value: Any


@dataclass(frozen=True)
class Factory:
    """Dependency producer, called with the construction arguments."""

    func: Callable[..., Any]

    def __post_init__(self) -> None:
        if not callable(self.func):
            msg = f"Factory expects a callable, got {type(self.func).__name__}"
            raise TypeError(msg)


def _is_reserved(name: str) -> bool:
    return (name.startswith("__") and name.endswith("__")) or name in DECORATOR_ATTRIBUTES


def hoist_statics(target: type[T], source: type, names: Iterable[str] | None = None) -> type[T]:
    """Copy the static members of `source` onto `target`.

    - `names=None`: every entry of the class namespace of `source`.
    - otherwise only the listed members; inherited ones are looked up with getattr.

    Dunder names and the decorator's own attributes are skipped. Namespace entries
    are copied raw, so staticmethods stay static and classmethods rebind to `target`.
    """
    namespace = vars(source)
    keys = list(namespace) if names is None else list(names)

    hoisted = []
    for key in keys:
        if _is_reserved(key):
            continue
        value = namespace[key] if key in namespace else getattr(source, key)
        setattr(target, key, value)
        hoisted.append(key)

    logger.debug("Hoisted statics %s from %s onto %s", hoisted, source.__qualname__, target.__qualname__)
    return target


def _call_producer(producer: Callable[..., Any], args: Sequence[Any], kwargs: Mapping[str, Any]) -> Any:
    """Call `producer` with the construction arguments its signature accepts.

    - builtin types (`dict`, `set`, `list`, ...) are called with no arguments.
    - surplus positional args and unknown keywords are dropped. Optional
      positional parameters still take construction args.
    - a producer without an introspectable signature gets every argument.
    """
    if isinstance(producer, type) and producer.__module__ == "builtins":
        return producer()

    try:
        sig = inspect.signature(producer)
    except (ValueError, TypeError):
        return producer(*args, **kwargs)

    params = list(sig.parameters.values())
    positional = [p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]

    if any(p.kind is p.VAR_POSITIONAL for p in params):
        call_args = tuple(args)
    else:
        call_args = tuple(args[: len(positional)])

    # names already filled positionally
    taken = {p.name for p in positional[: len(call_args)]}

    if any(p.kind is p.VAR_KEYWORD for p in params):
        call_kwargs = {k: v for k, v in kwargs.items() if k not in taken}
    else:
        accepted = {p.name for p in params if p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)}
        call_kwargs = {k: v for k, v in kwargs.items() if k in accepted and k not in taken}

    return producer(*call_args, **call_kwargs)


def _resolve_entry(entry: Any, args: Sequence[Any], kwargs: Mapping[str, Any]) -> tuple[Any, bool]:
    """Return the resolved value and whether a producer built it."""
    if isinstance(entry, Value):
        return entry.value, False
    if isinstance(entry, Factory):
        return _call_producer(entry.func, args, kwargs), True
    if callable(entry):
        return _call_producer(entry, args, kwargs), True
    return entry, False


def parse_injection_map(
    mapping: InjectionMap,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> dict[Hashable, Any]:
    """Resolve a dependency map into a new dict.

    Factories (and bare callables) are invoked with the `args`/`kwargs` they
    accept, `Value` entries are unwrapped and anything else is passed through.
    The input mapping is never mutated.
    """
    args = tuple(args)
    kwargs = kwargs or {}

    resolved: dict[Hashable, Any] = {}
    produced = []
    for key in mapping.keys():  # noqa: SIM118
        resolved[key], was_produced = _resolve_entry(mapping[key], args, kwargs)
        if was_produced:
            produced.append(key)

    logger.debug("Resolved injection map keys %s (produced: %s)", list(resolved), produced)
    return resolved


def inject(
    injection_map: InjectionMap | None = None,
    *,
    statics: Iterable[str] | None = None,
) -> Callable[[type[T]], type[T]]:
    """Decorate a class so its dependencies are injected on construction.

    Example:
      @inject({"db": create_db, "clock": Value(time.time)})
      class Service:
          def __init__(self, deps, name):
              ...

      Service("orders")                          # Service(resolved_deps, "orders")
      Service.with_dependencies({"db": fake_db}, "orders")

    The resolved dependency dict is always the first constructor argument.
    Instances are exactly what the wrapped class builds.

    With decorator syntax the module name refers to the decorated class, not to
    the class of its instances, so pickle cannot find that class by name.
    Decorate under a different name (`Service = inject(...)(_Service)` with a
    module-level `_Service`) when instances must be picklable.
    """
    if injection_map is None:
        injection_map = {}

    forward = None if statics is None else tuple(statics)

    def decorator(wrapped_class: type[T]) -> type[T]:
        def __new__(cls: type, *args: Any, **kwargs: Any) -> T:  # noqa: N807
            deps = parse_injection_map(cls.injection_map, args, kwargs)
            return cls.wrapped_class(deps, *args, **kwargs)

        def with_dependencies(cls: type, override_map: InjectionMap, /, *args: Any, **kwargs: Any) -> T:
            """Build an instance from `override_map` instead of the configured map."""
            logger.debug("Building %s with overriding dependencies", cls.wrapped_class.__name__)
            deps = parse_injection_map(override_map, args, kwargs)
            return cls.wrapped_class(deps, *args, **kwargs)

        namespace = {
            "__module__": wrapped_class.__module__,
            "__qualname__": wrapped_class.__qualname__,
            "__doc__": wrapped_class.__doc__,
            "__wrapped__": wrapped_class,
            "__new__": __new__,
            "with_dependencies": classmethod(with_dependencies),
            "injection_map": injection_map,
            "wrapped_class": wrapped_class,
        }
        decorated = type(wrapped_class.__name__, (), namespace)
        hoist_statics(decorated, wrapped_class, forward)

        # non-mapping maps fail at construction, not here
        keys = list(injection_map) if isinstance(injection_map, Mapping) else type(injection_map).__name__
        logger.debug("Decorated %s with injection map keys %s", wrapped_class.__qualname__, keys)
        return decorated

    return decorator
