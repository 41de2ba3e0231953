from rest_framework import serializers

from ..models import Rating
from ..services import RATING_RANGE_MESSAGE


RATING_FIELD_ERRORS = {
    'invalid': RATING_RANGE_MESSAGE,
    'min_value': RATING_RANGE_MESSAGE,
    'max_value': RATING_RANGE_MESSAGE,
    'max_string_length': RATING_RANGE_MESSAGE,
}


class StrictRatingField(serializers.IntegerField):
    """
    Integer field for star values that refuses booleans.

    DRF's `IntegerField` would coerce `True` to 1; a rating must be a real number.
    """

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail('invalid')
        return super().to_internal_value(data)


def rating_field():
    return StrictRatingField(min_value=1, max_value=5, error_messages=RATING_FIELD_ERRORS)


class RatingReadSerializer(serializers.ModelSerializer):
    """
    Plain representation of a rating row, as returned after a write.

    The related user and store are represented by their IDs.
    """
    user_id = serializers.IntegerField(read_only=True)
    store_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Rating
        fields = [
            'id',
            'user_id',
            'store_id',
            'rating',
            'created_at',
            'updated_at'
        ]
        read_only_fields = fields


class RatingSubmitSerializer(serializers.Serializer):
    """
    Validates a rating submission before it reaches the rating services.

    Input Fields:
        - store_id (int): The store to rate.
        - rating (int): 1 to 5.
    """
    store_id = serializers.IntegerField(
        min_value=1,
        error_messages={
            'invalid': 'Valid store ID is required',
            'min_value': 'Valid store ID is required',
            'required': 'Valid store ID is required',
        }
    )
    rating = rating_field()


class RatingUpdateSerializer(serializers.Serializer):
    """Only the star value of an existing rating can change."""
    rating = rating_field()


class StoreRatingSerializer(serializers.ModelSerializer):
    """A rating as seen by the store's owner or an admin, with the rating user's contact."""
    user_id = serializers.IntegerField(read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Rating
        fields = [
            'id',
            'rating',
            'created_at',
            'updated_at',
            'user_id',
            'user_name',
            'user_email'
        ]
        read_only_fields = fields


class UserRatingSerializer(serializers.ModelSerializer):
    """A rating as seen by the user who gave it, with the rated store's details."""
    store_id = serializers.IntegerField(read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    store_address = serializers.CharField(source='store.address', read_only=True)
    store_average_rating = serializers.FloatField(source='store.average_rating', read_only=True)

    class Meta:
        model = Rating
        fields = [
            'id',
            'rating',
            'created_at',
            'updated_at',
            'store_id',
            'store_name',
            'store_address',
            'store_average_rating'
        ]
        read_only_fields = fields
