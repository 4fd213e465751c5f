LIVE_LOG_QSS = r"""
QWidget { background-color: #0f1a12; color: #e8f5e9; }
QLabel { color: #b6e0bd; font-weight: bold; }
QPushButton { padding:6px 14px; font-size:12px; border-radius:4px; background:#182c1d; color:#b6e0bd; border:1px solid #2f5c39; }
QPushButton:hover { background:#213f29; border-color:#4caf50; }
QPushButton:pressed { background:#152820; }
QComboBox { background:#000; color:#e8f5e9; border:1px solid #2f5c39; border-radius:4px; padding:4px 8px; }
QComboBox:hover { border-color:#4caf50; background:#0a0a0a; }
QComboBox QAbstractItemView { background:#000; color:#e8f5e9; selection-background-color:#295c33; }
QCheckBox { color:#b6e0bd; }
QTableWidget { background:#000; color:#e8f5e9; gridline-color:#1a2f1f; selection-background-color:#295c33; border:1px solid #2f5c39; }
QHeaderView::section { background:#1a2f1f; color:#b6e0bd; padding:4px; border:1px solid #2f5c39; }
"""
