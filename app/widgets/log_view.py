from typing import Optional, Sequence

from PySide6.QtWidgets import (
    QAbstractItemView, QCheckBox, QComboBox, QHBoxLayout, QHeaderView, QLabel,
    QPushButton, QStyle, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from app.signals import get_log_view_signals
from config.settings import settings
from core.distributor import Distributor
from core.levels import LogLevel, TimeFormat
from core.logging_utils import get_logger
from core.message import LogMessage
from core.view import LogRow, ViewOptions, ViewProjection

logger = get_logger(__name__)

LEVEL_ICONS = {
    LogLevel.DEBUG: QStyle.StandardPixmap.SP_MessageBoxQuestion,
    LogLevel.INFORMATION: QStyle.StandardPixmap.SP_MessageBoxInformation,
    LogLevel.WARNING: QStyle.StandardPixmap.SP_MessageBoxWarning,
    LogLevel.ERROR: QStyle.StandardPixmap.SP_MessageBoxCritical,
}

TIME_FORMAT_LABELS = {
    TimeFormat.NONE: "No time",
    TimeFormat.COMPACT: "Time",
    TimeFormat.FULL: "Date and time",
}
TIME_FORMATS = list(TIME_FORMAT_LABELS)


class LogView(QWidget):
    """Live table of the messages published by a Distributor.

    The widget is only the rendering side; filtering, history and selection
    live in ``self.projection``.
    """

    def __init__(self, distributor: Optional[Distributor] = None, parent=None):
        super().__init__(parent)
        self._columns = ViewOptions().columns

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Controls row
        controls = QHBoxLayout()
        controls.addWidget(QLabel("Log level:"))
        self.level_menu = QComboBox()
        self.level_menu.addItems([level.label for level in LogLevel])
        controls.addWidget(self.level_menu)

        self.source_check = QCheckBox("Source")
        controls.addWidget(self.source_check)

        self.time_menu = QComboBox()
        self.time_menu.addItems(list(TIME_FORMAT_LABELS.values()))
        controls.addWidget(self.time_menu)

        controls.addStretch()
        self.clear_button = QPushButton("Clear")
        controls.addWidget(self.clear_button)
        layout.addLayout(controls)

        # Message table
        self.table = QTableWidget()
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setSortingEnabled(False)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionsMovable(False)
        layout.addWidget(self.table)

        self.projection = ViewProjection.from_settings(settings, sink=self)
        self.projection.add_selection_listener(self._on_selection_changed)

        self.level_menu.currentIndexChanged.connect(self._on_level_changed)
        self.source_check.toggled.connect(self._on_source_toggled)
        self.time_menu.currentIndexChanged.connect(self._on_time_format_changed)
        self.clear_button.clicked.connect(self.projection.clear)
        self.table.itemSelectionChanged.connect(self._on_table_selection)

        if distributor is not None:
            self.projection.bind(distributor)
        else:
            self.projection.activate()

    @property
    def distributor(self) -> Optional[Distributor]:
        return self.projection.distributor

    def set_distributor(self, distributor: Distributor) -> None:
        self.projection.bind(distributor)

    @property
    def selected_message(self) -> Optional[LogMessage]:
        return self.projection.selection

    # Row sink

    def render_rows(self, rows: Sequence[LogRow]) -> None:
        self.table.blockSignals(True)
        try:
            self.table.clearContents()
            self.table.setColumnCount(len(self._columns))
            # Level column shows icons only
            self.table.setHorizontalHeaderLabels([""] + list(self._columns[1:]))
            self.table.setRowCount(len(rows))
            for r, row in enumerate(rows):
                cells = row.cells
                level_item = QTableWidgetItem(self.style().standardIcon(LEVEL_ICONS[row.level]), "")
                level_item.setToolTip(cells[0])
                self.table.setItem(r, 0, level_item)
                for c, value in enumerate(cells[1:], start=1):
                    self.table.setItem(r, c, QTableWidgetItem(value))

            header = self.table.horizontalHeader()
            header.setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
            for c in range(1, len(self._columns) - 1):
                header.setSectionResizeMode(c, QHeaderView.ResizeMode.ResizeToContents)
            header.setSectionResizeMode(len(self._columns) - 1, QHeaderView.ResizeMode.Stretch)
            if rows:
                self.table.scrollToBottom()
        finally:
            self.table.blockSignals(False)

    def clear_rows(self) -> None:
        self.table.blockSignals(True)
        try:
            self.table.setRowCount(0)
        finally:
            self.table.blockSignals(False)

    def select_row(self, index: Optional[int]) -> None:
        self.table.blockSignals(True)
        try:
            if index is None:
                self.table.clearSelection()
            else:
                self.table.selectRow(index)
        finally:
            self.table.blockSignals(False)

    def sync_options(self, options: ViewOptions) -> None:
        self._columns = options.columns
        for widget in (self.level_menu, self.source_check, self.time_menu):
            widget.blockSignals(True)
        try:
            self.level_menu.setCurrentIndex(int(options.log_level))
            self.source_check.setChecked(options.show_source)
            self.time_menu.setCurrentIndex(TIME_FORMATS.index(options.time_format))
            self.clear_button.setVisible(options.allow_clear)
        finally:
            for widget in (self.level_menu, self.source_check, self.time_menu):
                widget.blockSignals(False)

    # User actions

    def _on_level_changed(self, index: int) -> None:
        self.projection.set_log_level(LogLevel(index))

    def _on_source_toggled(self, checked: bool) -> None:
        self.projection.show_source = checked

    def _on_time_format_changed(self, index: int) -> None:
        self.projection.time_format = TIME_FORMATS[index]

    def _on_table_selection(self) -> None:
        selected = self.table.selectionModel().selectedRows()
        self.projection.on_row_activated(selected[0].row() if selected else None)

    def _on_selection_changed(self, message: Optional[LogMessage]) -> None:
        get_log_view_signals().message_selected.emit(message)

    def closeEvent(self, event):
        self.projection.dispose()
        get_log_view_signals().view_closed.emit()
        logger.debug("Live log view closed")
        super().closeEvent(event)
