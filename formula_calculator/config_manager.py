# config_manager.py
import json
import logging
from pathlib import Path

from . import error as E

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"
saved_formulas_json = Path(__file__).resolve().parent.parent / "saved_formulas.json"


def read_json(path, default):
    """Load a JSON file; a missing or corrupt file reads as `default`."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    except FileNotFoundError:
        logger.debug("%s not found, using defaults", path)
        return default
    except json.JSONDecodeError as e:
        logger.warning("Ignoring corrupt %s: %s", path, e)
        return default


def write_json(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=4)
    return data


def lookup(path, key_value):
    """'all' gives the whole mapping, any other key its value or 0."""
    settings_dict = read_json(path, {})
    if not isinstance(settings_dict, dict):
        logger.warning("Ignoring %s: expected an object, got %s", path, type(settings_dict).__name__)
        settings_dict = {}

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_value(key_value):
    return lookup(config_json, key_value)


def load_setting_description(key_value):
    return lookup(ui_strings, key_value)


def save_setting(settings_dict):
    try:
        return write_json(config_json, settings_dict)

    except OSError as e:
        logger.warning("Could not write %s: %s", config_json, e)
        return {}


# -----------------------------
# Saved formulas
# -----------------------------

def load_saved_formulas():
    """Return the saved formula list; a missing or corrupt store reads as empty."""
    formulas = read_json(saved_formulas_json, [])

    if not isinstance(formulas, list):
        logger.warning("Ignoring %s: expected a list, got %s", saved_formulas_json, type(formulas).__name__)
        return []

    return [formula for formula in formulas if isinstance(formula, str)]


def write_saved_formulas(formulas):
    try:
        return write_json(saved_formulas_json, formulas)
    except OSError as e:
        raise E.ConfigError(f"Could not write {saved_formulas_json.name}: {e}", code="5001")


def save_formula(formula):
    """Append a formula unless it is blank or already saved; return the list."""
    formulas = load_saved_formulas()
    formula = (formula or "").strip()
    if not formula or formula in formulas:
        return formulas
    formulas.append(formula)
    return write_saved_formulas(formulas)


def delete_formula(formula):
    formulas = [saved for saved in load_saved_formulas() if saved != formula]
    return write_saved_formulas(formulas)
