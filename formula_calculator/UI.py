# UI.py
"""PySide6 user interface for the Formula Calculator.

Structure
---------
- FormulaCalculator: main window (formula input, saved formulas, LaTeX preview,
  variable inputs, result and error display)
- SettingsDialog: modal dialog for user preferences

Responsibilities (FormulaCalculator)
------------------------------------
- Re-run the engine on every formula keystroke and every variable edit
- Derive the variable inputs from the formula, keeping values of names that persist
- Show the LaTeX preview, the formatted result, and engine errors inline
- Save / load / delete formulas through config_manager
- Clipboard integration: copy the result, or the LaTeX source while Shift is held

Responsibilities (Settings)
---------------------------
- Load Current Settings and Settings Descriptions via config_manager
- Validate user input (minimum decimal places)
- Save and apply theme changes immediately

Everything runs synchronously on the Qt event loop.
"""

import logging
import sys

import pyperclip
from PySide6 import QtWidgets
from PySide6.QtCore import Qt
from pynput.keyboard import Controller

from . import LatexEngine
from . import MathEngine
from . import ScientificEngine
from . import config_manager
from . import error as E

logger = logging.getLogger(__name__)

MIN_DECIMAL_PLACES = 2

DARK_STYLESHEET = """
    QWidget {background-color: #121212; color: white;}
    QLineEdit {background-color: #444444; color: white; border: 1px solid #666666;}
    QPushButton {background-color: #2e2e2e; color: white; border: 1px solid #444444; padding: 4px 10px;}
    QPushButton:disabled {color: #777777;}
    QListWidget {background-color: #1e1e1e;}
"""


def is_shift_pressed():
    """Shift state as reported by pynput; used for the copy-LaTeX shortcut."""
    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


def parse_variable_value(text):
    """Text from a variable input as float; anything non-numeric counts as 0."""
    try:
        return float(text)
    except ValueError:
        return 0.0


class SettingsDialog(QtWidgets.QDialog):
    """Settings window built from config.json and ui_strings.json.

    Boolean settings become checkboxes, integer settings become input fields.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        self.setWindowTitle("Formula Calculator Settings")
        self.setMinimumSize(320, 200)

        main_layout = QtWidgets.QVBoxLayout(self)

        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(f"{description} (min. {MIN_DECIMAL_PLACES}):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))
                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

            else:
                logger.warning("Setting %r has unsupported value %r", key_value, value)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(self.save_settings)
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self):
        new_settings = dict(self.setting_value_list)

        for key_value, widget in self.widgets.items():
            if isinstance(widget, QtWidgets.QCheckBox):
                new_settings[key_value] = widget.isChecked()
                continue

            new_value_str = widget.text().strip()
            if new_value_str == "":
                continue  # blank keeps the old value

            try:
                new_value_int = int(new_value_str)
                if key_value == "decimal_places" and new_value_int < MIN_DECIMAL_PLACES:
                    raise ValueError(f"'{new_value_int}' is too small. Minimum is {MIN_DECIMAL_PLACES}.")
            except ValueError as e:
                QtWidgets.QMessageBox.critical(
                    self, "Invalid Input:",
                    f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                return

            new_settings[key_value] = new_value_int

        if config_manager.save_setting(new_settings) == {}:
            QtWidgets.QMessageBox.critical(self, "Error", "Settings could not be saved (error in config_manager).")
            return

        self.setting_value_list = new_settings
        self.accept()

    def update_darkmode(self):
        if self.setting_value_list.get("darkmode") == True:
            self.setStyleSheet(DARK_STYLESHEET)
        else:
            self.setStyleSheet("")


class FormulaCalculator(QtWidgets.QWidget):
    shift_is_held = False

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings and Saved Formulas ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.saved_formulas = config_manager.load_saved_formulas()

        # --- 2. Instance State ---
        self.formula = ""
        self.variables = {}
        self.variable_inputs = {}
        self.result = None
        self.latex_formula = ""

        # --- 3. Window Setup ---
        self.setWindowTitle("Formula Calculator")
        self.resize(480, 560)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        title = QtWidgets.QLabel("Simple Formula Calculator")
        font = title.font()
        font.setPointSize(18)
        font.setBold(True)
        title.setFont(font)
        main_v_layout.addWidget(title)

        # --- 4. Formula Input Row ---
        main_v_layout.addWidget(QtWidgets.QLabel("Enter Formula"))
        input_row = QtWidgets.QHBoxLayout()
        self.formula_input = QtWidgets.QLineEdit()
        self.formula_input.setPlaceholderText("e.g., x^(a+b)^z")
        self.formula_input.textChanged.connect(self.handle_formula_change)
        self.save_button = QtWidgets.QPushButton("Save")
        self.save_button.clicked.connect(self.handle_save_formula)
        self.copy_button = QtWidgets.QPushButton("📋")
        self.copy_button.setToolTip("Copy result (hold Shift to copy the LaTeX source)")
        self.copy_button.clicked.connect(self.handle_copy)
        self.settings_button = QtWidgets.QPushButton("⚙️")
        self.settings_button.clicked.connect(self.open_settings)
        input_row.addWidget(self.formula_input, 1)
        input_row.addWidget(self.save_button)
        input_row.addWidget(self.copy_button)
        input_row.addWidget(self.settings_button)
        main_v_layout.addLayout(input_row)

        # --- 5. Saved Formulas ---
        self.toggle_list_button = QtWidgets.QPushButton("Show Saved Formulas")
        self.toggle_list_button.clicked.connect(self.toggle_saved_formulas)
        self.formulas_list = QtWidgets.QListWidget()
        self.formulas_list.itemClicked.connect(self.load_formula)
        self.formulas_list.setVisible(False)
        main_v_layout.addWidget(self.toggle_list_button)
        main_v_layout.addWidget(self.formulas_list)

        # --- 6. LaTeX Preview ---
        main_v_layout.addWidget(QtWidgets.QLabel("LaTeX Preview"))
        self.latex_output = QtWidgets.QLabel("")
        self.latex_output.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.latex_output.setWordWrap(True)
        main_v_layout.addWidget(self.latex_output)

        # --- 7. Variables ---
        self.variables_box = QtWidgets.QGroupBox("Variables")
        self.variables_form = QtWidgets.QFormLayout(self.variables_box)
        self.variables_box.setVisible(False)
        main_v_layout.addWidget(self.variables_box)

        # --- 8. Result and Error ---
        main_v_layout.addWidget(QtWidgets.QLabel("Result"))
        self.result_display = QtWidgets.QLabel("-")
        result_font = self.result_display.font()
        result_font.setPointSize(16)
        self.result_display.setFont(result_font)
        self.result_display.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        main_v_layout.addWidget(self.result_display)

        self.error_display = QtWidgets.QLabel("")
        self.error_display.setStyleSheet("color: #d32f2f;")
        self.error_display.setWordWrap(True)
        self.error_display.setVisible(False)
        main_v_layout.addWidget(self.error_display)

        support_info = QtWidgets.QLabel(
            "Supports: arithmetic operations (+, -, *, /), exponents (^), parentheses "
            "and logarithms ln(...) and log(...). Nested exponents like x^(a+b)^z are supported.")
        support_info.setWordWrap(True)
        main_v_layout.addWidget(support_info)
        main_v_layout.addStretch(1)

        self.refresh_saved_formulas()
        self.update_save_button()
        self.update_darkmode()

    # --- Key Event Handlers ---
    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = True
            self.copy_button.setText("TeX")
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
            self.copy_button.setText("📋")
        super().keyReleaseEvent(event)

    # --- Formula and Variables ---
    def handle_formula_change(self, new_formula):
        self.formula = new_formula
        self.latex_formula = LatexEngine.convert_to_latex(new_formula)
        self.latex_output.setText(f"${self.latex_formula}$" if self.latex_formula else "")
        self.update_variables(new_formula)
        self.update_save_button()

    def update_variables(self, new_formula):
        new_variables = MathEngine.update_variables(new_formula, self.variables)
        names_changed = list(new_variables) != list(self.variables)
        self.variables = new_variables
        if names_changed:
            self.rebuild_variable_inputs()
        self.evaluate_formula()

    def rebuild_variable_inputs(self):
        while self.variables_form.rowCount():
            self.variables_form.removeRow(0)
        self.variable_inputs = {}

        for name, value in self.variables.items():
            input_field = QtWidgets.QLineEdit(ScientificEngine.format_value(value))
            input_field.textEdited.connect(lambda text, name=name: self.handle_variable_change(name, text))
            self.variables_form.addRow(f"{name}:", input_field)
            self.variable_inputs[name] = input_field

        self.variables_box.setVisible(bool(self.variables))

    def handle_variable_change(self, name, text):
        self.variables = dict(self.variables)
        self.variables[name] = parse_variable_value(text)
        self.evaluate_formula()

    def evaluate_formula(self):
        try:
            self.result = MathEngine.calculate(self.formula, self.variables)
        except E.MathError as e:
            self.result = None
            self.show_error(e)
        else:
            self.clear_error()
        self.show_result()

    # --- Result and Error Display ---
    def show_result(self):
        self.result_display.setText(MathEngine.format_result(
            self.result,
            decimal_places=self.setting_value_list.get("decimal_places", 6),
            scientific=self.setting_value_list.get("scientific_notation", True)))

    def show_error(self, error_obj):
        self.error_display.setText(E.describe(error_obj))
        self.error_display.setToolTip(
            f"{E.category(error_obj.code)}: {E.ERROR_MESSAGES.get(error_obj.code, 'Unknown error')}\n"
            f"Formula: {error_obj.equation}")
        self.error_display.setVisible(True)

    def clear_error(self):
        self.error_display.setText("")
        self.error_display.setVisible(False)

    # --- Saved Formulas ---
    def update_save_button(self):
        formula = self.formula.strip()
        self.save_button.setEnabled(bool(formula) and formula not in self.saved_formulas)

    def toggle_saved_formulas(self):
        is_open = not self.formulas_list.isVisible()
        self.formulas_list.setVisible(is_open)
        self.toggle_list_button.setText("Hide Saved Formulas" if is_open else "Show Saved Formulas")

    def refresh_saved_formulas(self):
        self.formulas_list.clear()

        if not self.saved_formulas:
            placeholder = QtWidgets.QListWidgetItem("No saved formulas")
            placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
            self.formulas_list.addItem(placeholder)
            return

        for saved_formula in self.saved_formulas:
            item = QtWidgets.QListWidgetItem()
            item.setData(Qt.ItemDataRole.UserRole, saved_formula)

            row = QtWidgets.QWidget()
            row_layout = QtWidgets.QHBoxLayout(row)
            row_layout.setContentsMargins(4, 2, 4, 2)
            row_layout.addWidget(QtWidgets.QLabel(f"${LatexEngine.convert_to_latex(saved_formula)}$"), 1)
            delete_button = QtWidgets.QPushButton("×")
            delete_button.clicked.connect(
                lambda checked=False, formula=saved_formula: self.handle_delete_formula(formula))
            row_layout.addWidget(delete_button)

            item.setSizeHint(row.sizeHint())
            self.formulas_list.addItem(item)
            self.formulas_list.setItemWidget(item, row)

    def handle_save_formula(self):
        try:
            self.saved_formulas = config_manager.save_formula(self.formula)
        except E.ConfigError as e:
            self.show_error(e)
            return
        self.refresh_saved_formulas()
        self.update_save_button()

    def handle_delete_formula(self, formula):
        try:
            self.saved_formulas = config_manager.delete_formula(formula)
        except E.ConfigError as e:
            self.show_error(e)
            return
        self.refresh_saved_formulas()
        self.update_save_button()

    def load_formula(self, item):
        saved_formula = item.data(Qt.ItemDataRole.UserRole)
        if saved_formula:
            self.formula_input.setText(saved_formula)

    # --- Clipboard ---
    def handle_copy(self):
        if self.shift_is_held or is_shift_pressed():
            text = self.latex_formula
        elif self.result is not None:
            text = self.result_display.text()
        else:
            text = ""

        if not text:
            self.show_error(E.MathError("Nothing to copy", code="4002", equation=self.formula))
            return
        pyperclip.copy(text)

    # --- Settings and Theme ---
    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # modal

        # Reload settings after dialog closes so theme and decimals apply
        self.setting_value_list = config_manager.load_setting_value("all")
        self.update_darkmode()
        self.show_result()

    def update_darkmode(self):
        if self.setting_value_list.get("darkmode") == True:
            self.setStyleSheet(DARK_STYLESHEET)
            self.latex_output.setStyleSheet("font-family: monospace; color: white;")
        else:
            self.setStyleSheet("")
            self.latex_output.setStyleSheet("font-family: monospace;")


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = FormulaCalculator()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
