"""
Conversion services.

- ConversionResolver: multi-hop factor resolution over the rule graph
- ConversionRuleService: rule validation and creation
- seed_default_rules: generic rules loaded on setup
"""
from conversions.services.conversion_service import (
    ConversionGraph,
    ConversionResolver,
    RuleRecord,
    invalidate_rule_snapshot,
    load_rule_snapshot,
)
from conversions.services.rule_service import ConversionRuleService, seed_default_rules

__all__ = [
    'ConversionGraph',
    'ConversionResolver',
    'RuleRecord',
    'invalidate_rule_snapshot',
    'load_rule_snapshot',
    'ConversionRuleService',
    'seed_default_rules',
]
