"""Handler declarations and dispatch registry for the document driver.

Handlers declare the HTML tags they translate with the ``@renders``
decorator, which records a lightweight :class:`RuleDefinition` on the
callable. :class:`RenderRegistry` collects those definitions into
:class:`RenderRule` instances grouped per tag, and the driver asks it for the
single rule that applies to each node it meets while walking the tree in
document order.

Each node is handled by exactly one rule. When several rules target the same
tag, class filters narrow the candidates and the priority breaks ties (higher
first, then by name). Tags without a rule have their children rendered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast


if TYPE_CHECKING:  # pragma: no cover - typing only
    from bs4.element import Tag


RuleCallable = Callable[[Any, Any], None]


@dataclass
class RenderRule:
    """Concrete rule registered in the registry."""

    priority: int
    tags: tuple[str, ...]
    classes: tuple[str, ...]
    name: str
    handler: RuleCallable

    def matches(self, node: Tag) -> bool:
        """Return True when the node carries every class the rule requires."""
        if not self.classes:
            return True
        present = node.get("class") or []
        if isinstance(present, str):
            present = present.split()
        return all(cls in present for cls in self.classes)


@dataclass(frozen=True)
class RuleDefinition:
    """Descriptor installed on handler callables by the decorator."""

    tags: tuple[str, ...]
    classes: tuple[str, ...] = ()
    priority: int = 0
    name: str | None = None

    def bind(self, handler: RuleCallable) -> RenderRule:
        """Create a concrete rule bound to the callable."""
        name = self.name or getattr(handler, "__name__", handler.__class__.__name__)
        return RenderRule(
            priority=self.priority,
            tags=self.tags,
            classes=self.classes,
            name=name,
            handler=handler,
        )


class RenderRegistry:
    """Container used to gather rules before rendering."""

    def __init__(self) -> None:
        self._rules: dict[str, list[RenderRule]] = {}

    def register(self, rule: RenderRule) -> None:
        """Register a rule for each of its tags."""
        for tag in rule.tags:
            bucket = self._rules.setdefault(tag, [])
            bucket.append(rule)
            bucket.sort(key=lambda item: (-item.priority, -len(item.classes), item.name))

    def rules_for(self, tag: str) -> tuple[RenderRule, ...]:
        return tuple(self._rules.get(tag, ()))

    def resolve(self, node: Tag) -> RenderRule | None:
        """Return the first rule applicable to ``node``."""
        for rule in self._rules.get(getattr(node, "name", None) or "", ()):
            if rule.matches(node):
                return rule
        return None

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the registered rules."""
        entries: list[dict[str, object]] = []
        for tag in sorted(self._rules):
            for order, rule in enumerate(self._rules[tag]):
                entries.append(
                    {
                        "tag": tag,
                        "name": rule.name,
                        "classes": list(rule.classes),
                        "priority": rule.priority,
                        "order": order,
                    }
                )
        return entries

    def collect_from(self, owner: Any) -> None:
        """Collect decorated callables from an object or module."""
        for attribute in dir(owner):
            handler = getattr(owner, attribute)
            definition = getattr(handler, "__render_rule__", None)
            if isinstance(definition, RuleDefinition):
                self.register(definition.bind(handler))


def renders(
    *tags: str,
    classes: Iterable[str] = (),
    priority: int = 0,
    name: str | None = None,
) -> Callable[[RuleCallable], RuleCallable]:
    """Decorator used to register element handlers."""
    if not tags:
        raise TypeError("@renders needs at least one tag name")
    definition = RuleDefinition(
        tags=tuple(tags),
        classes=tuple(classes),
        priority=priority,
        name=name,
    )

    def decorator(handler: RuleCallable) -> RuleCallable:
        cast(Any, handler).__render_rule__ = definition
        return handler

    return decorator


__all__ = ["RenderRegistry", "RenderRule", "RuleDefinition", "renders"]
