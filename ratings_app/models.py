from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Rating(models.Model):
    """
    A star rating given by a user to a store.

    A user rates a store at most once: the pair (`user`, `store`) is unique at the database
    level, and submitting again updates the existing row instead of adding a new one.

    Attributes:
        user (ForeignKey): The user who gave the rating. Deleting the user deletes their
            ratings.
        store (ForeignKey): The rated store. Deleting the store deletes its ratings.
        rating (PositiveSmallIntegerField): 1 to 5, enforced by validators and a check
            constraint.
        created_at (DateTimeField): Set when the rating is first submitted.
        updated_at (DateTimeField): Advanced on every resubmission or update.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name='ratings',
        on_delete=models.CASCADE,
        help_text="The user who submitted the rating."
    )
    store = models.ForeignKey(
        'stores_app.Store',
        related_name='ratings',
        on_delete=models.CASCADE,
        help_text="The store being rated."
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="The rating given, from 1 to 5."
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'ratings'
        ordering = ['-updated_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'store'], name='unique_rating_per_user_and_store'),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name='rating_between_1_and_5'
            ),
        ]
        verbose_name = "Rating"
        verbose_name_plural = "Ratings"

    def __str__(self):
        return f"Rating by {self.user_id} for store {self.store_id} ({self.rating} stars)"
