# Main.py
""" Entry point for the Formula Calculator.

   Responsibilities:
   - Detect run mode (script vs PyInstaller .exe)
   - Verify required files exist in development mode
   - Configure logging from the settings and start the Qt GUI

"""
import logging
import sys
from pathlib import Path

from formula_calculator import config_manager, UI

logger = logging.getLogger(__name__)


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent


def check_files_exist():
    """
      Fail fast in development if required files are missing / moved / renamed.
      In production (.exe) the files are embedded by the bundler, so this check is skipped.
    """

    package_dir = PROJECT_ROOT / "formula_calculator"

    REQUIRED = [
        package_dir / "UI.py",
        package_dir / "MathEngine.py",
        package_dir / "LatexEngine.py",
        package_dir / "ScientificEngine.py",
        package_dir / "config_manager.py",
        package_dir / "error.py",
        PROJECT_ROOT / "config.json",
        PROJECT_ROOT / "ui_strings.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def configure_logging(all_settings):
    level = logging.DEBUG if all_settings.get("debug") == True else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main():
    """
    Load configuration and start the GUI.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_setting_value("all")
    configure_logging(all_settings)
    logger.debug("Config loaded: %s", all_settings)

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main()


if __name__ == "__main__":
    if not getattr(sys, 'frozen', False):
        check_files_exist()
    main()
