"""Rule sets indexed by language, fed by the built-ins and ``codelens.rules`` plugins.

Third-party packages add rule sets through the entry-point group::

    [project.entry-points."codelens.rules"]
    todo = "my_rules:TodoRules"

The entry point may name a ``RuleSet`` subclass or a ready instance.
"""

from __future__ import annotations

from importlib import metadata
from typing import AbstractSet, Dict, Iterable, List, Optional, Tuple, Type

from ..languages import LanguageTag, resolve_language
from ..logging import get_logger
from .base import RuleSet
from .c_family import CppRules, JavaRules
from .javascript import JavaScriptRules
from .markup import CssRules, HtmlRules
from .python import PythonRules

ENTRY_POINT_GROUP = "codelens.rules"

BUILTIN_RULE_SETS: Tuple[Type[RuleSet], ...] = (
    JavaScriptRules,
    PythonRules,
    JavaRules,
    CppRules,
    HtmlRules,
    CssRules,
)

logger = get_logger(__name__)


class RuleRegistry:
    """Named rule sets, looked up by the language being checked.

    Registration order is run order. A second rule set under an existing
    name is ignored, so built-ins cannot be shadowed by a plugin.
    """

    def __init__(self, rule_sets: Iterable[RuleSet] = ()) -> None:
        self._rule_sets: Dict[str, RuleSet] = {}
        for rule_set in rule_sets:
            self.register(rule_set)

    @classmethod
    def default(cls) -> "RuleRegistry":
        registry = cls(rule_set() for rule_set in BUILTIN_RULE_SETS)
        for rule_set in load_plugins():
            registry.register(rule_set)
        return registry

    def register(self, rule_set: RuleSet) -> bool:
        key = _key(rule_set)
        if key in self._rule_sets:
            logger.debug("Rule set %s is already registered; ignoring duplicate", key)
            return False
        self._rule_sets[key] = rule_set
        return True

    def names(self) -> List[str]:
        return list(self._rule_sets)

    def all(self) -> List[RuleSet]:
        return list(self._rule_sets.values())

    def for_language(
        self, language: object, disabled: AbstractSet[str] = frozenset()
    ) -> List[RuleSet]:
        """Rule sets that check ``language`` and still have a kind left to report.

        ``disabled`` holds diagnostic kinds or rule set names. A rule set is
        skipped when its name is disabled or when every kind it declares is.
        """
        tag: LanguageTag = resolve_language(language)
        selected: List[RuleSet] = []
        for key, rule_set in self._rule_sets.items():
            if not rule_set.supports(tag):
                continue
            if key in disabled or (rule_set.kinds and rule_set.kinds <= disabled):
                logger.debug("Rule set %s disabled for %s", key, tag.value)
                continue
            selected.append(rule_set)
        return selected


def load_plugins() -> List[RuleSet]:
    """Instantiate every rule set advertised under ``codelens.rules``."""
    plugins: List[RuleSet] = []
    for entry in metadata.entry_points().select(group=ENTRY_POINT_GROUP):
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(
                f"Rule plugin '{entry.name}' ({entry.value}) could not be imported: {exc}"
            ) from exc
        rule_set = _as_rule_set(loaded)
        if rule_set is None:
            raise TypeError(
                f"Rule plugin '{entry.name}' ({entry.value}) is not a RuleSet subclass or instance"
            )
        logger.debug(
            "Loaded rule plugin %s for %s",
            entry.name,
            ", ".join(sorted(tag.value for tag in rule_set.languages)) or "every language",
        )
        plugins.append(rule_set)
    return plugins


def discover_rules(
    language: Optional[object] = None, disabled: AbstractSet[str] = frozenset()
) -> List[RuleSet]:
    """Built-in and plugin rule sets, narrowed to ``language`` when one is given."""
    registry = RuleRegistry.default()
    if language is None:
        return registry.all()
    return registry.for_language(language, disabled)


def _as_rule_set(obj: object) -> Optional[RuleSet]:
    if isinstance(obj, type) and issubclass(obj, RuleSet):
        obj = obj()
    return obj if isinstance(obj, RuleSet) else None


def _key(rule_set: RuleSet) -> str:
    return (rule_set.name or type(rule_set).__name__).lower()


__all__ = [
    "BUILTIN_RULE_SETS",
    "ENTRY_POINT_GROUP",
    "RuleRegistry",
    "discover_rules",
    "load_plugins",
]
