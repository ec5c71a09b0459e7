"""Registry of concrete classes for polymorphic decoding.

When a JSON object carries a class tag (``"class"`` by default), the decoder
looks the tag up here to find the concrete subtype to build. Every class that
should be reachable this way is registered once at startup, typically with
``@register_class_tag`` or ``@jsonizable(tags=...)``.

The registry is read-only during decoding. Registration is the only mutation
and is expected to finish before concurrent decoding starts; ``freeze()``
enforces that barrier.

Example:
    >>> @register_class_tag
    ... @jsonizable
    ... class Sprite(Component):
    ...     texture: str = ""
    >>> CLASS_REGISTRY.lookup("game.components.Sprite", Component)
    <class 'game.components.Sprite'>
"""

from threading import RLock
from typing import Any, Type, TypeVar

from .exceptions import JsonizeRegistryError
from .utils.logger import logger

__all__ = [
    "ClassRegistry",
    "CLASS_REGISTRY",
    "qualified_name",
    "register_class_tag",
]

T = TypeVar("T")


def qualified_name(cls: type) -> str:
    """The default tag of a class: ``module.QualName``."""
    return f"{cls.__module__}.{cls.__qualname__}"


class ClassRegistry(dict[str, Type[Any]]):
    """Mapping from class tag to concrete class.

    A plain dict underneath, so it can be inspected, copied and restored
    (e.g. in tests). Writes go through ``register`` and are refused once the
    registry is frozen.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._lock = RLock()
        self._frozen = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self)} tags, frozen={self._frozen})"

    def __setitem__(self, tag: str, cls: Type[Any]) -> None:
        with self._lock:
            if self._frozen:
                raise JsonizeRegistryError(
                    f"Cannot register {tag!r}: the class registry is frozen."
                )
            previous = self.get(tag)
            if previous is not None and previous is not cls:
                logger.warning(
                    f"Class tag {tag!r} re-registered: {previous.__qualname__} -> {cls.__qualname__}"
                )
            super().__setitem__(tag, cls)

    @property
    def frozen(self) -> bool:
        """Whether registration is closed."""
        return self._frozen

    def freeze(self) -> None:
        """Close registration. Further ``register`` calls raise ``JsonizeRegistryError``."""
        with self._lock:
            self._frozen = True
        logger.debug(f"Class registry frozen with {len(self)} tags")

    def register(self, cls: Type[T], *tags: str) -> Type[T]:
        """Register ``cls`` under its qualified name and any extra ``tags``.

        Args:
            cls: The concrete class.
            *tags: Additional tags, e.g. short names used by foreign producers.

        Returns:
            ``cls``, so this can back a decorator.

        Raises:
            JsonizeRegistryError: If the registry is frozen.
        """
        for tag in (qualified_name(cls), *tags):
            self[tag] = cls
        logger.debug(f"Registered {cls.__qualname__} under tags {[qualified_name(cls), *tags]}")
        return cls

    def lookup(self, tag: str, base: type) -> Type[Any] | None:
        """Return the class registered under ``tag`` if it is ``base`` or a subclass of it."""
        cls = self.get(tag)
        if cls is None or not issubclass(cls, base):
            return None
        return cls

    def tags_of(self, cls: type) -> list[str]:
        """All tags under which ``cls`` is registered."""
        return [tag for tag, registered in self.items() if registered is cls]


CLASS_REGISTRY = ClassRegistry()
"""The process-wide registry used when ``DecodeOptions.registry`` is not set."""


def register_class_tag(*args: Any, registry: ClassRegistry | None = None):
    """Register a class for polymorphic decoding.

    Three spellings are accepted::

        @register_class_tag                 # qualified name only
        @register_class_tag("Sprite")       # qualified name and "Sprite"
        register_class_tag(Sprite, "Sprite")

    Args:
        *args: Optionally the class, followed by extra tags.
        registry: Registry to write to; defaults to ``CLASS_REGISTRY``.

    Returns:
        The class when it was given, otherwise a decorator.
    """
    target = registry if registry is not None else CLASS_REGISTRY

    if args and isinstance(args[0], type):
        cls, *tags = args
        return target.register(cls, *tags)

    def wrap(klass: Type[T]) -> Type[T]:
        return target.register(klass, *args)

    return wrap
