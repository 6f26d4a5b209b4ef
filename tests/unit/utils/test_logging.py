"""Unit tests for logging setup."""

import logging

from cgexplore.utils.logging import setup_logging
from rich.logging import RichHandler


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_default_level_is_warning(self) -> None:
        """Without verbose only warnings and errors are shown."""
        setup_logging()
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)

    def test_verbose_enables_debug(self) -> None:
        """verbose switches to DEBUG."""
        setup_logging(verbose=True)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert root.handlers[0].level == logging.DEBUG

    def test_repeated_setup_does_not_stack_handlers(self) -> None:
        """Calling setup twice keeps a single handler."""
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1
