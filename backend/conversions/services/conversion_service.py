"""
Unit conversion service for the inventory engine.

Rules form a directed graph of units. Each stored rule contributes a forward
edge and a synthesized inverse edge; a breadth-first search chains them into
multi-hop conversions (e.g. tablespoon -> teaspoon -> gram).
"""
import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from django.core.cache import cache
from django.db import transaction

from conversions.exceptions import NoConversionPathError
from conversions.models import ConversionRule
from core_backend.config import engine_settings

logger = logging.getLogger(__name__)

RULE_SNAPSHOT_CACHE_KEY = "conversions:rule_snapshot"


@dataclass(frozen=True)
class RuleRecord:
    """Read-only copy of a ConversionRule row."""
    id: int
    from_unit: str
    to_unit: str
    factor: Decimal
    ingredient_id: Optional[int] = None


@dataclass(frozen=True)
class ConversionEdge:
    to_unit: str
    factor: Decimal
    rule_id: int
    specific: bool
    stored: bool

    @property
    def rank(self) -> Tuple[bool, bool, int]:
        # Lower sorts first: specific before generic, stored before inverse, lower id first
        return (not self.specific, not self.stored, self.rule_id)


def load_rule_snapshot() -> Tuple[RuleRecord, ...]:
    """
    Return every conversion rule as an immutable tuple of RuleRecords.

    The snapshot is shared through Django's cache and dropped whenever a rule
    is saved or deleted (see conversions.signals).
    """
    snapshot = cache.get(RULE_SNAPSHOT_CACHE_KEY)
    if snapshot is None:
        snapshot = tuple(
            RuleRecord(
                id=rule_id,
                from_unit=from_unit,
                to_unit=to_unit,
                factor=factor,
                ingredient_id=ingredient_id,
            )
            for rule_id, from_unit, to_unit, factor, ingredient_id in (
                ConversionRule.objects.order_by('id').values_list(
                    'id', 'from_unit', 'to_unit', 'factor', 'ingredient_id'
                )
            )
        )
        cache.set(RULE_SNAPSHOT_CACHE_KEY, snapshot, engine_settings.conversion_cache_timeout)
        logger.debug(f"Loaded conversion rule snapshot with {len(snapshot)} rules")
    return snapshot


def invalidate_rule_snapshot() -> None:
    """Drop the cached snapshot now and again once the current transaction commits."""
    cache.delete(RULE_SNAPSHOT_CACHE_KEY)
    transaction.on_commit(lambda: cache.delete(RULE_SNAPSHOT_CACHE_KEY))
    logger.info("Conversion rule snapshot invalidated")


class ConversionGraph:
    """
    Adjacency map of units for one conversion scope.

    The scope is either generic (ingredient_id=None, only generic rules apply)
    or a single ingredient (its specific rules plus every generic rule).
    For each (from, to) pair only the highest-priority edge is kept.
    """

    def __init__(self, rules: Iterable[RuleRecord], ingredient_id: Optional[int] = None):
        self.ingredient_id = ingredient_id
        best: Dict[Tuple[str, str], ConversionEdge] = {}

        for rule in rules:
            if rule.ingredient_id is not None and rule.ingredient_id != ingredient_id:
                continue
            specific = rule.ingredient_id is not None
            candidates = (
                (rule.from_unit, ConversionEdge(rule.to_unit, rule.factor, rule.id, specific, True)),
                (rule.to_unit, ConversionEdge(rule.from_unit, Decimal("1") / rule.factor, rule.id, specific, False)),
            )
            for source, edge in candidates:
                key = (source, edge.to_unit)
                current = best.get(key)
                if current is None or edge.rank < current.rank:
                    best[key] = edge

        adjacency: Dict[str, List[ConversionEdge]] = defaultdict(list)
        for (source, _), edge in best.items():
            adjacency[source].append(edge)
        for edges in adjacency.values():
            edges.sort(key=lambda e: e.to_unit)
        self._adjacency = dict(adjacency)

    def neighbours(self, unit: str) -> List[ConversionEdge]:
        return self._adjacency.get(unit, [])

    @property
    def units(self):
        return set(self._adjacency)

    def find_factor(self, from_unit: str, to_unit: str, max_units: int) -> Optional[Decimal]:
        """
        Breadth-first search for the cumulative factor from from_unit to to_unit.

        A path may contain at most max_units units, the start unit included.
        Returns None when the target is unreachable within that bound.
        """
        if from_unit == to_unit:
            return Decimal("1")

        visited = {from_unit}
        frontier = deque([(from_unit, Decimal("1"), 1)])

        while frontier:
            unit, factor, path_length = frontier.popleft()
            if path_length >= max_units:
                continue
            for edge in self.neighbours(unit):
                if edge.to_unit in visited:
                    continue
                cumulative = factor * edge.factor
                if edge.to_unit == to_unit:
                    return cumulative
                visited.add(edge.to_unit)
                frontier.append((edge.to_unit, cumulative, path_length + 1))

        return None


class ConversionResolver:
    """
    Resolves conversion factors between units.

    Supports:
    - Generic rules (applicable to every ingredient)
    - Ingredient-specific rules (override generic ones for the same pair)
    - Inverse conversion (1 / factor) and multi-hop chains

    One resolver reads one rule snapshot and memoises graphs and factors, so
    create a fresh instance per operation to pick up rule changes.
    """

    def __init__(self, rules: Optional[Iterable[RuleRecord]] = None, max_depth: Optional[int] = None):
        self._rules = tuple(rules) if rules is not None else None
        self.max_depth = max_depth if max_depth is not None else engine_settings.max_conversion_depth
        self._graphs: Dict[Optional[int], ConversionGraph] = {}
        self._factor_cache: Dict[Tuple[str, str, Optional[int]], Optional[Decimal]] = {}

    @property
    def rules(self) -> Tuple[RuleRecord, ...]:
        if self._rules is None:
            self._rules = load_rule_snapshot()
        return self._rules

    def graph_for(self, ingredient_id: Optional[int] = None) -> ConversionGraph:
        if ingredient_id not in self._graphs:
            self._graphs[ingredient_id] = ConversionGraph(self.rules, ingredient_id)
        return self._graphs[ingredient_id]

    def resolve(self, from_unit: str, to_unit: str, ingredient_id: Optional[int] = None) -> Decimal:
        """
        Return the factor f such that 1 from_unit = f to_unit.

        Args:
            from_unit: The source unit.
            to_unit: The target unit.
            ingredient_id: Optional ingredient whose specific rules take precedence.

        Raises:
            NoConversionPathError: If no path of at most max_depth units exists.
        """
        from_unit = from_unit.strip()
        to_unit = to_unit.strip()

        if from_unit == to_unit:
            return Decimal("1")

        cache_key = (from_unit, to_unit, ingredient_id)
        if cache_key not in self._factor_cache:
            self._factor_cache[cache_key] = self.graph_for(ingredient_id).find_factor(
                from_unit, to_unit, self.max_depth
            )

        factor = self._factor_cache[cache_key]
        if factor is None:
            logger.debug(
                f"No conversion path from '{from_unit}' to '{to_unit}' (ingredient={ingredient_id})"
            )
            raise NoConversionPathError(from_unit, to_unit, ingredient_id)
        return factor

    def can_convert(self, from_unit: str, to_unit: str, ingredient_id: Optional[int] = None) -> bool:
        try:
            self.resolve(from_unit, to_unit, ingredient_id)
        except NoConversionPathError:
            return False
        return True

    def convert(
        self,
        quantity: Decimal,
        from_unit: str,
        to_unit: str,
        ingredient_id: Optional[int] = None,
        precision: Optional[int] = None
    ) -> Decimal:
        """
        Convert a quantity from one unit to another.

        The result is rounded half-up to `precision` decimal places
        (STOCK_DECIMAL_PLACES by default).
        """
        if precision is None:
            precision = engine_settings.stock_decimal_places
        result = Decimal(quantity) * self.resolve(from_unit, to_unit, ingredient_id)
        return result.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
