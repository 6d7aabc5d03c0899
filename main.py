# main.py
import logging

from config import get_settings
from events import default_key_source
from logging_setup import setup_logging
from storage import JsonStorage
from task_manager import TaskManager
from ui import App

logger = logging.getLogger(__name__)


def main():
    """Entry point: set up settings, logging and the store, then run the UI."""
    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, level=settings.log_level)

    try:
        # Initialize backend components
        storage = JsonStorage(settings.db_path)
        if settings.create_db:
            storage.ensure_exists()
        task_manager = TaskManager(storage)

        app = App(task_manager, default_key_source(), tick_rate=settings.tick_rate)
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as e:
        # The terminal is already restored here; print a clean message.
        logger.exception("Fatal error")
        print(f"An error occurred: {e}")
    finally:
        print("todo-CLI has shut down.")


if __name__ == "__main__":
    main()
