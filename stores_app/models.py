from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Store(models.Model):
    """
    A store that users can rate.

    `average_rating` and `total_ratings` are denormalised copies of the aggregates over the
    store's `Rating` rows. They are never written directly by clients; the rating services
    recompute them inside the same transaction as every rating write (see
    `ratings_app.services.refresh_store_aggregates`).

    Attributes:
        name (CharField): Display name of the store.
        email (EmailField): Unique contact address, stored in lower case.
        address (CharField): Postal address, up to 400 characters.
        average_rating (FloatField): Mean of all ratings, 0 when there are none.
        total_ratings (PositiveIntegerField): Number of ratings.
        created_at (DateTimeField): Set once on creation.
        updated_at (DateTimeField): Refreshed on every save.
    """
    name = models.CharField(max_length=255, db_index=True)
    email = models.EmailField(unique=True, max_length=255)
    address = models.CharField(max_length=400)

    average_rating = models.FloatField(
        default=0.0,
        validators=[MinValueValidator(0.0), MaxValueValidator(5.0)],
        help_text="Derived from the ratings table; do not edit by hand."
    )
    total_ratings = models.PositiveIntegerField(
        default=0,
        help_text="Derived from the ratings table; do not edit by hand."
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stores'
        ordering = ['-average_rating', '-total_ratings', 'name']
        verbose_name = "Store"
        verbose_name_plural = "Stores"

    def __str__(self):
        return self.name
