"""Channel adapter registry — pluggable notification dispatch channels.

Provides singleton access to channel adapters. Email goes through SMTP when
the SMTP_* environment variables are set and through the recording fake
adapter otherwise.
"""

from storefront.notifications.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str = NotificationChannel.EMAIL.value):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            from storefront.notifications.channel.smtp_email import SmtpEmailAdapter, SmtpSettings

            settings = SmtpSettings.from_env()
            if settings is not None:
                _channel_instances[channel_type] = SmtpEmailAdapter(settings)
            else:
                from storefront.notifications.channel.fake_email import FakeEmailAdapter

                _channel_instances[channel_type] = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    """Install an adapter explicitly, replacing whatever was configured."""
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
