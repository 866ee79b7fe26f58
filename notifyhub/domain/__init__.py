"""Domain layer of the notification core."""
