"""gentask: hierarchical personal tasks with deadline reminders."""

__version__ = "0.1.0"
