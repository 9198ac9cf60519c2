"""
Main Window
===========
Thin shell around the engine: topic picker, a form generated from the
topic's ParameterSpec, Calculate / Simulate buttons, the result text and the
simulation canvas.

No physics and no timer logic lives here; every action is forwarded to the
current `TopicSession`.
"""
from __future__ import annotations

import logging

from PySide6.QtCore import Signal, Slot
from PySide6.QtWidgets import (
    QComboBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QLineEdit, QMainWindow,
    QPushButton, QSizePolicy, QVBoxLayout, QWidget,
)

from physicsexplorer.config import APP_NAME
from physicsexplorer.controller.session import ExplorerSession, TopicSession
from physicsexplorer.model.results import CalculationError, allows_simulation, describe
from physicsexplorer.model.state import SimulationState
from physicsexplorer.model.topics import get_topic, list_keys
from physicsexplorer.view.canvas_widget import SimulationCanvas
from physicsexplorer.view.plotting import plot_run

logger = logging.getLogger(__name__)


class ParameterForm(QGroupBox):
    """Line edits for the fields of one topic variant."""

    edited = Signal()  # the user changed a field or the variant

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__("Parameters", parent)
        layout = QVBoxLayout(self)
        selector_row = QFormLayout()
        self.selector_label = QLabel("", self)
        self.selector = QComboBox(self)
        self.selector.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        selector_row.addRow(self.selector_label, self.selector)
        layout.addLayout(selector_row)
        self.fields = QFormLayout()
        layout.addLayout(self.fields)

        self._edits: dict[str, QLineEdit] = {}
        self._session: TopicSession | None = None
        self.selector.currentIndexChanged.connect(self._on_variant_changed)

    def bind(self, session: TopicSession) -> None:
        self._session = session
        topic = session.topic
        self.setTitle(topic.title)

        self.selector.blockSignals(True)
        self.selector.clear()
        has_selector = topic.selector is not None
        if has_selector:
            self.selector_label.setText(topic.selector.label)
            for value, text in topic.selector.options:
                self.selector.addItem(text, value)
            initial = topic.sample_inputs.get(topic.selector.name) or topic.selector.default
            index = self.selector.findData(initial) if initial else 0
            self.selector.setCurrentIndex(max(index, 0))
            session.on_field_change(topic.selector.name, self.selector.currentData())
        self.selector.blockSignals(False)
        self.selector_label.setVisible(has_selector)
        self.selector.setVisible(has_selector)
        self._rebuild()

    def _rebuild(self) -> None:
        session = self._session
        while self.fields.rowCount():
            self.fields.removeRow(0)
        self._edits.clear()

        topic = session.topic
        variant = self.selector.currentData() if topic.selector is not None else None
        for field in topic.spec_for(variant):
            edit = QLineEdit(self)
            edit.setPlaceholderText(field.placeholder or ("required" if field.required else "optional"))
            text = session.raw_fields.get(field.name) or topic.sample_inputs.get(field.name, "")
            edit.setText(text)
            session.on_field_change(field.name, text)
            edit.textEdited.connect(lambda raw, name=field.name: self._on_edited(name, raw))
            self.fields.addRow(field.display_label, edit)
            self._edits[field.name] = edit

    def _on_edited(self, name: str, raw: str) -> None:
        if self._session is not None:
            self._session.on_field_change(name, raw)
            self.edited.emit()

    @Slot(int)
    def _on_variant_changed(self, _index: int) -> None:
        if self._session is None or self._session.topic.selector is None:
            return
        self._session.on_field_change(self._session.topic.selector.name, self.selector.currentData())
        self._rebuild()
        self.edited.emit()


class MainWindow(QMainWindow):
    def __init__(self, explorer: ExplorerSession) -> None:
        super().__init__()
        self.explorer = explorer
        self.setWindowTitle(APP_NAME)

        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QHBoxLayout(central)

        # --- Left: inputs ---
        side = QVBoxLayout()
        self.topic_combo = QComboBox(self)
        for key in list_keys():
            self.topic_combo.addItem(get_topic(key).title, key)
        side.addWidget(QLabel("Topic", self))
        side.addWidget(self.topic_combo)

        self.form = ParameterForm(self)
        side.addWidget(self.form)

        buttons = QHBoxLayout()
        self.btn_calculate = QPushButton("Calculate", self)
        self.btn_simulate = QPushButton("Simulate", self)
        self.btn_plot = QPushButton("Plot run", self)
        buttons.addWidget(self.btn_calculate)
        buttons.addWidget(self.btn_simulate)
        buttons.addWidget(self.btn_plot)
        side.addLayout(buttons)

        self.result_label = QLabel("", self)
        self.result_label.setWordWrap(True)
        self.result_label.setMinimumWidth(280)
        side.addWidget(self.result_label)
        side.addStretch()
        layout.addLayout(side, 0)

        # --- Right: canvas ---
        self.canvas = SimulationCanvas(self)
        layout.addWidget(self.canvas, 1)

        self.topic_combo.currentIndexChanged.connect(self.on_topic_changed)
        self.btn_calculate.clicked.connect(self.on_calculate)
        self.btn_simulate.clicked.connect(self.toggle_play)
        self.btn_plot.clicked.connect(self.on_plot)
        self.form.edited.connect(self.clear_result)
        self.explorer.topic_changed.connect(self._bind_session)

        self.on_topic_changed(self.topic_combo.currentIndex())

    @property
    def session(self) -> TopicSession | None:
        return self.explorer.current

    @Slot(int)
    def on_topic_changed(self, index: int) -> None:
        key = self.topic_combo.itemData(index)
        if key:
            self.explorer.select_topic(key)

    def _bind_session(self, session: TopicSession) -> None:
        session.animation.state_changed.connect(self._on_state_changed)
        self.form.bind(session)
        self.canvas.bind(session)
        self.clear_result()
        self._on_state_changed(session.animation.state)

    @Slot()
    def clear_result(self) -> None:
        """The shown result belongs to inputs that no longer exist."""
        self.result_label.setText("")
        self.result_label.setStyleSheet("")
        self.canvas.update()

    @Slot()
    def on_calculate(self) -> None:
        if self.session is None:
            return
        result = self.session.calculate()
        self.result_label.setText(describe(result))
        self.result_label.setStyleSheet("color: #c62828;" if isinstance(result, CalculationError) else "")
        self.canvas.update()

    @Slot()
    def toggle_play(self) -> None:
        if self.session is None:
            return
        if self.session.animation.is_running():
            self.session.stop()
        elif not self.session.start():
            if allows_simulation(self.session.result):
                self.result_label.setText(describe(self.session.result)
                                          + "\n\nNothing moves with these inputs; give a non-zero rate or speed.")
            else:
                self.result_label.setText("Calculate a valid result before simulating.")

    @Slot()
    def on_plot(self) -> None:
        if self.session is None or self.session.parameters is None:
            self.result_label.setText("Calculate a valid result before plotting.")
            return
        plot_run(self.session.parameters, show=False).show()

    def _on_state_changed(self, state: SimulationState) -> None:
        self.btn_simulate.setText("Reset" if state.is_running else "Simulate")

    def closeEvent(self, event) -> None:
        if self.session is not None:
            self.session.close()
        super().closeEvent(event)
