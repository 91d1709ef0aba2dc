"""Edge application service building blocks: custom configuration, sample pipeline functions and service start-up."""

__version__ = "0.1.0"

__all__ = ["app", "config", "sample"]