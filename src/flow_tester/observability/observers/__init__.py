from .harness import HarnessObserver, LoggingObserver, NoOpHarnessObserver

__all__ = ["HarnessObserver", "LoggingObserver", "NoOpHarnessObserver"]
