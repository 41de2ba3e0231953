"""
Rating write paths and rating statistics.

Every write runs in one transaction that first locks the rated store's row. Writers for the
same store are therefore serialised, which keeps the one-rating-per-user-and-store rule intact
under concurrent duplicate submissions and lets the store aggregates, refreshed by the signal
handlers in `ratings_app.signals` inside that same transaction, see every committed rating.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import Avg, Count, Max, Min, Q
from django.utils import timezone

from core.exceptions import NotFoundError, ValidationError
from stores_app.models import Store
from .models import Rating

logger = logging.getLogger(__name__)

RATING_VALUES = range(1, 6)
RATING_RANGE_MESSAGE = 'Rating must be between 1 and 5'
RATING_NOT_FOUND_MESSAGE = 'Rating not found or access denied'


def validate_rating_value(value):
    """
    Returns `value` as an int if it is a whole number from 1 to 5.

    Accepts ints, integral floats and digit strings. Booleans, fractions and anything
    non-numeric raise `ValidationError` before any database work happens.
    """
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        number = None

    if number is None or number not in RATING_VALUES:
        raise ValidationError({'rating': [RATING_RANGE_MESSAGE]})
    return number


def refresh_store_aggregates(store_id):
    """
    Recomputes `average_rating` and `total_ratings` of a store from its ratings.

    Uses a queryset `update()` so it is a no-op for a store that is being deleted.
    """
    aggregates = Rating.objects.filter(store_id=store_id).aggregate(
        total=Count('id'),
        average=Avg('rating')
    )
    Store.objects.filter(pk=store_id).update(
        total_ratings=aggregates['total'],
        average_rating=aggregates['average'] or 0.0
    )


def _lock_store(store_id):
    try:
        return Store.objects.select_for_update().get(pk=store_id)
    except Store.DoesNotExist:
        raise NotFoundError('Store not found')


def _lock_owned_rating(rating_id, user):
    """
    Locks the rated store, then the rating itself, and returns the rating.

    The store is locked first, the same order `submit_rating` uses. A rating that does not
    exist or belongs to someone else is reported identically, so callers cannot discover
    other users' ratings.
    """
    store_id = (
        Rating.objects.filter(pk=rating_id, user=user)
        .values_list('store_id', flat=True)
        .first()
    )
    if store_id is None:
        raise NotFoundError(RATING_NOT_FOUND_MESSAGE)

    Store.objects.select_for_update().filter(pk=store_id).first()

    try:
        return Rating.objects.select_for_update().get(pk=rating_id, user=user)
    except Rating.DoesNotExist:
        raise NotFoundError(RATING_NOT_FOUND_MESSAGE)


def submit_rating(user, store_id, value):
    """
    Creates the user's rating for a store, or overwrites it if one exists.

    Returns a `(rating, created)` tuple. Raises `NotFoundError` if the store does not exist.
    """
    value = validate_rating_value(value)

    with transaction.atomic():
        store = _lock_store(store_id)
        # update_or_create retries as an update if a concurrent insert wins the race.
        rating, created = Rating.objects.update_or_create(
            user=user,
            store=store,
            defaults={'rating': value}
        )

    logger.info(
        '%s rating id=%s user=%s store=%s value=%s',
        'Created' if created else 'Updated', rating.pk, user.pk, store.pk, value
    )
    return rating, created


def update_rating(rating_id, user, value):
    """Changes the value of a rating owned by `user`."""
    value = validate_rating_value(value)

    with transaction.atomic():
        rating = _lock_owned_rating(rating_id, user)
        rating.rating = value
        rating.save(update_fields=['rating', 'updated_at'])

    logger.info('Updated rating id=%s user=%s value=%s', rating.pk, user.pk, value)
    return rating


def delete_rating(rating_id, user):
    """Deletes a rating owned by `user` and returns the deleted instance."""
    with transaction.atomic():
        rating = _lock_owned_rating(rating_id, user)
        rating.delete()

    logger.info('Deleted rating id=%s user=%s', rating_id, user.pk)
    return rating


def recent_cutoff():
    return timezone.now() - timedelta(days=settings.RECENT_ACTIVITY_DAYS)


def store_rating_stats(store_id):
    """
    Live statistics over one store's ratings, computed in a single aggregate query.

    Returns count, average, min, max (all 0 when there are no ratings) and a histogram keyed
    by the rating value as a string.
    """
    histogram = {
        f'star_{value}': Count('id', filter=Q(rating=value)) for value in RATING_VALUES
    }
    stats = Rating.objects.filter(store_id=store_id).aggregate(
        total_ratings=Count('id'),
        average_rating=Avg('rating'),
        min_rating=Min('rating'),
        max_rating=Max('rating'),
        **histogram
    )
    return {
        'total_ratings': stats['total_ratings'],
        'average_rating': float(stats['average_rating'] or 0),
        'min_rating': stats['min_rating'] or 0,
        'max_rating': stats['max_rating'] or 0,
        'distribution': {str(value): stats[f'star_{value}'] for value in RATING_VALUES},
    }


def top_rated_stores(min_ratings, limit):
    """Stores with at least `min_ratings` ratings, best average first, ties by rating count."""
    return list(
        Store.objects.filter(total_ratings__gte=min_ratings)
        .order_by('-average_rating', '-total_ratings', 'name')
        .values('id', 'name', 'average_rating', 'total_ratings')[:limit]
    )


def platform_rating_stats():
    """
    Platform-wide rating statistics.

    The distribution reports, for every rating value that occurs, its count and its share of
    all ratings in percent (two decimals).
    """
    totals = Rating.objects.aggregate(
        total=Count('id'),
        average=Avg('rating'),
        recent=Count('id', filter=Q(created_at__gte=recent_cutoff()))
    )
    total = totals['total']

    distribution = {}
    for row in Rating.objects.values('rating').annotate(count=Count('id')).order_by('rating'):
        distribution[str(row['rating'])] = {
            'count': row['count'],
            'percentage': round(row['count'] * 100.0 / total, 2),
        }

    return {
        'total': total,
        'averageRating': float(totals['average'] or 0),
        'distribution': distribution,
        'recent': totals['recent'],
        'topStores': top_rated_stores(min_ratings=3, limit=10),
    }
