"""
Signal handlers for conversion rules.

Any change to the rule set drops the cached rule snapshot.
"""
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from conversions.models import ConversionRule
from conversions.services.conversion_service import invalidate_rule_snapshot


@receiver(post_save, sender=ConversionRule)
@receiver(post_delete, sender=ConversionRule)
def invalidate_conversion_cache(sender, instance, **kwargs):
    invalidate_rule_snapshot()
