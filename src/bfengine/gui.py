"""Desktop front end.

The engine is driven from a QTimer in the GUI thread, one bounded
``Engine.run(max_steps=...)`` slice per tick, so the window stays responsive
and no other thread ever touches the engine.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QColor, QFont, QKeySequence, QTextCursor
from PyQt5.QtWidgets import (
    QAction, QApplication, QFileDialog, QGroupBox, QHBoxLayout, QLabel,
    QLineEdit, QMainWindow, QMessageBox, QPushButton, QShortcut, QSplitter,
    QStatusBar, QTableWidget, QTableWidgetItem, QTextEdit, QVBoxLayout, QWidget
)

from .compiler import compile_source
from .engine import Engine
from .errors import BFError
from .state import StopReason

READY_TEXT = "[Brainfuck Interpreter is ready]"
SLICE_STEPS = 200_000
MEMORY_ROWS = 8


class BrainfuckWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("BrainFucker")
        self.setGeometry(100, 100, 800, 600)

        self.engine: Optional[Engine] = None
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.execute_slice)

        self.init_ui()
        self.init_menu()

    def init_ui(self):
        main_widget = QWidget()
        main_layout = QVBoxLayout(main_widget)
        self.setCentralWidget(main_widget)

        # --- Source and controls ---
        self.source_group = QGroupBox("Source:")
        source_layout = QVBoxLayout(self.source_group)
        self.code_edit = QTextEdit()
        self.code_edit.setFont(QFont("Courier", 12))
        self.code_edit.setAcceptRichText(False)
        source_layout.addWidget(self.code_edit)

        run_layout = QHBoxLayout()
        self.run_button = QPushButton("Run (F6)")
        self.stop_button = QPushButton("Stop (F7)")
        self.run_button.clicked.connect(self.run_program)
        self.stop_button.clicked.connect(self.stop_execution)
        run_layout.addWidget(self.run_button)
        run_layout.addWidget(self.stop_button)
        run_layout.addStretch()
        source_layout.addLayout(run_layout)

        # --- Result, input and memory ---
        splitter = QSplitter(Qt.Vertical)

        result_group = QGroupBox("Result:")
        result_layout = QVBoxLayout(result_group)
        self.result_display = QTextEdit()
        self.result_display.setReadOnly(True)
        self.result_display.setFont(QFont("Courier", 12))
        self.result_display.setPlainText(READY_TEXT)
        result_layout.addWidget(self.result_display)

        input_layout = QHBoxLayout()
        input_layout.addWidget(QLabel("Input:"))
        self.input_line = QLineEdit()
        self.input_line.setPlaceholderText("Input for ',' then press Push")
        self.input_line.returnPressed.connect(self.push_input)
        self.push_button = QPushButton("Push")
        self.push_button.clicked.connect(self.push_input)
        input_layout.addWidget(self.input_line, 1)
        input_layout.addWidget(self.push_button)
        result_layout.addLayout(input_layout)

        memory_group = QGroupBox("Memory State")
        memory_layout = QVBoxLayout(memory_group)
        self.memory_table = QTableWidget()
        self.memory_table.setColumnCount(17)
        self.memory_table.setHorizontalHeaderLabels(["Address"] + [f"{i:02X}" for i in range(16)])
        self.memory_table.verticalHeader().setVisible(False)
        self.memory_table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.memory_table.setFont(QFont("Courier", 10))
        memory_layout.addWidget(self.memory_table)

        splitter.addWidget(result_group)
        splitter.addWidget(memory_group)
        splitter.setSizes([300, 200])

        main_layout.addWidget(self.source_group, 3)
        main_layout.addWidget(splitter, 4)

        # --- Status Bar ---
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_info = QLabel("Ready")
        self.status_bar.addWidget(self.status_info)

        QShortcut(QKeySequence("F6"), self, self.run_program)
        QShortcut(QKeySequence("F7"), self, self.stop_execution)

    def init_menu(self):
        file_menu = self.menuBar().addMenu("File")
        open_action = QAction("Open File...", self)
        open_action.triggered.connect(self.open_file)
        save_action = QAction("Save As...", self)
        save_action.triggered.connect(self.save_file)
        file_menu.addAction(open_action)
        file_menu.addAction(save_action)

    # ---------------- File menu ----------------
    def open_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open File", "", "Brainfuck (*.bf *.b);;All Files (*)")
        if not path:
            return
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            QMessageBox.critical(self, "Opening file is failed", "Opening file is failed")
            return
        self.source_group.setTitle("Source: " + Path(path).name)
        self.code_edit.setPlainText(source)

    def save_file(self):
        path, _ = QFileDialog.getSaveFileName(self, "Save As", "", "Brainfuck (*.bf *.b);;All Files (*)")
        if not path:
            QMessageBox.critical(self, "Invalid path used", "Invalid path used")
            return
        source = self.code_edit.toPlainText()
        if not source:
            return
        try:
            Path(path).write_text(source, encoding="utf-8")
        except OSError:
            QMessageBox.critical(self, "Writing into file failed", "Writing into file failed")
            return
        self.source_group.setTitle("Source: " + Path(path).name)

    # ---------------- Execution ----------------
    def append_result(self, text: str):
        self.result_display.moveCursor(QTextCursor.End)
        self.result_display.insertPlainText(text)
        self.result_display.moveCursor(QTextCursor.End)

    def flush_output(self):
        if self.engine is None:
            return
        text = self.engine.drain_output().decode("latin-1")
        if text:
            self.append_result(text)

    def run_program(self):
        if self.engine is not None:
            return
        source = self.code_edit.toPlainText()
        if not source:
            return
        try:
            program = compile_source(source)
        except BFError as e:
            self.append_result(f"\n[Interpreter Error: {e}]")
            return

        self.engine = Engine(program)
        self.append_result("\n")
        self.status_info.setText("Running...")
        self.timer.start(0)

    def execute_slice(self):
        engine = self.engine
        if engine is None:
            self.timer.stop()
            return

        try:
            reason = engine.run(max_steps=SLICE_STEPS)
            if reason is StopReason.AWAITING_INPUT and engine.pending_input:
                # queued input left over from an earlier Push
                engine.supply_input(b"")
                return
        except BFError as e:
            self.flush_output()
            self.finish_run(f"\n[Interpreter Error: {e}]")
            return

        self.flush_output()
        self.update_status_info()
        if reason is StopReason.COMPLETE:
            self.finish_run("")
        elif reason is StopReason.AWAITING_INPUT:
            self.timer.stop()
            self.append_result("\n[Input] <- ")
            self.status_info.setText("Waiting for input...")
            self.input_line.setFocus()

    def push_input(self):
        text = self.input_line.text()
        engine = self.engine
        if not text or engine is None:
            return
        self.input_line.clear()
        if not engine.awaiting_input:
            engine.supply_input(text)
            return
        try:
            engine.supply_input(text)
        except BFError as e:
            self.finish_run(f"\n[Interpreter Error: {e}]")
            return
        self.append_result(text + "\n")
        self.timer.start(0)

    def finish_run(self, message: str):
        self.timer.stop()
        if message:
            self.append_result(message)
        self.update_status_info()
        self.engine = None
        self.status_info.setText("Program finished." if not message else "Stopped.")

    def stop_execution(self):
        if self.engine is None:
            return
        self.timer.stop()
        self.flush_output()
        self.append_result("\n[Interrupt]")
        self.engine = None
        self.status_info.setText("Interrupted.")

    # ---------------- Display ----------------
    def update_status_info(self):
        if self.engine is None:
            return
        snap = self.engine.snapshot()
        ascii_char = chr(snap.cell) if 32 <= snap.cell <= 126 else '.'
        self.status_info.setText(
            f"PC: {snap.counter} | Pointer: {snap.pointer} | Value: {snap.cell} ('{ascii_char}') | "
            f"Steps: {snap.steps:,} | Queued input: {snap.pending_input}"
        )
        self.update_memory_table()

    def update_memory_table(self):
        engine = self.engine
        if engine is None:
            return
        first_row = max(0, engine.pointer // 16 - MEMORY_ROWS // 2)
        start = first_row * 16
        window: List[int] = list(engine.tape_window(start, start + MEMORY_ROWS * 16))

        self.memory_table.clearContents()
        self.memory_table.setRowCount((len(window) + 15) // 16)
        for r in range(self.memory_table.rowCount()):
            addr_item = QTableWidgetItem(f"{start + r * 16:05X}")
            addr_item.setTextAlignment(Qt.AlignCenter)
            self.memory_table.setItem(r, 0, addr_item)
            for c in range(16):
                i = r * 16 + c
                if i >= len(window):
                    break
                val = window[i]
                item = QTableWidgetItem(str(val))
                item.setTextAlignment(Qt.AlignCenter)
                if start + i == engine.pointer:
                    item.setBackground(QColor(255, 165, 0))
                elif val:
                    intensity = min(255, 70 + val)
                    item.setBackground(QColor(intensity // 4, intensity, intensity // 4))
                self.memory_table.setItem(r, c + 1, item)
        self.memory_table.resizeColumnsToContents()

    def closeEvent(self, event):
        self.timer.stop()
        self.engine = None
        event.accept()


def main(argv: Optional[List[str]] = None) -> int:
    app = QApplication(sys.argv if argv is None else argv)
    app.setStyle("Fusion")
    window = BrainfuckWindow()
    window.show()
    return app.exec_()


if __name__ == "__main__":
    raise SystemExit(main())
