from .adapters import MockNotifier, Notifier, PinpointNotifier, SESNotifier, create_notifier

__all__ = ["MockNotifier", "Notifier", "PinpointNotifier", "SESNotifier", "create_notifier"]
