import logging

import pytest


@pytest.fixture
def restore_logging():
    """Undo root/component logger changes made by setup_logging."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    components = [logging.getLogger(name) for name in ("gridpath.planning", "gridpath.utils")]
    saved_component_levels = [logger.level for logger in components]

    yield

    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)

    for logger, level in zip(components, saved_component_levels):
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(level)
