"""FeatureRegistry: an explicit, instance-scoped feature resolver."""
from __future__ import annotations

from typing import Any, Callable, Sequence

from practempo.types import ResolutionError

FeatureFactory = Callable[[Sequence[str], "int | None"], Any]


class FeatureRegistry:
    """Maps ``(category, type name)`` pairs to feature factories.

    ``factory(args, max_render_height)`` builds the renderable object handed
    to the display sink. Satisfies the ``FeatureResolver`` protocol.
    """

    def __init__(self) -> None:
        self._categories: dict[str, dict[str, FeatureFactory]] = {}

    def register(self, category_name: str, type_name: str, factory: FeatureFactory) -> None:
        """Register a feature type. Overwrites if already registered."""
        self._categories.setdefault(category_name, {})[type_name] = factory

    def has(self, category_name: str, type_name: str) -> bool:
        return type_name in self._categories.get(category_name, {})

    def categories(self) -> list[str]:
        return list(self._categories)

    def names(self, category_name: str) -> list[str]:
        """List feature type names of a category (empty if unknown)."""
        return list(self._categories.get(category_name, {}))

    def resolve(
        self,
        category_name: str,
        type_name: str,
        args: Sequence[str],
        max_render_height: int | None = None,
    ) -> Any | None:
        """Build the feature, or return None if the type is not registered.

        Raises ``ResolutionError`` if the factory rejects ``args``.
        """
        factory = self._categories.get(category_name, {}).get(type_name)
        if factory is None:
            return None
        try:
            return factory(tuple(args), max_render_height)
        except (TypeError, ValueError) as e:
            raise ResolutionError(
                f"cannot create {category_name}/{type_name} from {list(args)!r}: {e}"
            ) from e
