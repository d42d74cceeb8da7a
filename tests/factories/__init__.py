"""Factory helpers for test data generation."""

from datetime import date

from faker import Faker

from core.models import (
    InventoryItem,
    MobilePushToken,
    PushSubscription,
    User,
    UserNotificationPreference,
)

fake = Faker()


def make_user(**kwargs) -> User:
    """Create a user with a unique email."""
    defaults = {
        "email": fake.unique.email(),
        "first_name": fake.first_name(),
    }
    defaults.update(kwargs)
    return User.objects.create(**defaults)


def make_preference(user: User | None = None, **kwargs) -> UserNotificationPreference:
    """Create a preference row (defaults match a freshly registered user)."""
    return UserNotificationPreference.objects.create(user=user or make_user(), **kwargs)


def make_item(user: User, expiration_date: date, **kwargs) -> InventoryItem:
    """Create a live inventory item."""
    defaults = {
        "item_name": fake.word().capitalize(),
        "quantity": 1,
        "category": "produce",
    }
    defaults.update(kwargs)
    return InventoryItem.objects.create(
        user=user, expiration_date=expiration_date, **defaults
    )


def make_web_subscription(user: User, **kwargs) -> PushSubscription:
    """Create a browser push subscription."""
    defaults = {
        "endpoint": f"https://push.example.com/{fake.uuid4()}",
        "keys": {"p256dh": fake.sha256(), "auth": fake.md5()},
    }
    defaults.update(kwargs)
    return PushSubscription.objects.create(user=user, **defaults)


def make_mobile_token(user: User, **kwargs) -> MobilePushToken:
    """Create an Expo push token."""
    defaults = {
        "expo_token": f"ExponentPushToken[{fake.pystr(min_chars=22, max_chars=22)}]",
        "device_name": fake.word(),
    }
    defaults.update(kwargs)
    return MobilePushToken.objects.create(user=user, **defaults)
