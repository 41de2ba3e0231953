from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Rating
from .services import refresh_store_aggregates


@receiver(post_save, sender=Rating)
@receiver(post_delete, sender=Rating)
def sync_store_aggregates(sender, instance, **kwargs):
    """
    Keeps `Store.average_rating` and `Store.total_ratings` equal to the live aggregates.

    Runs for every saved or deleted rating, including cascade deletes when a user is removed
    and edits made through the Django admin, inside the transaction of the triggering write.
    """
    refresh_store_aggregates(instance.store_id)
