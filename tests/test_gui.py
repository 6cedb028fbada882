#!/usr/bin/env python3
"""
GUI driver tests, run on Qt's offscreen platform.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

pytest.importorskip("PyQt5")

from PyQt5.QtWidgets import QApplication

from bfengine.gui import READY_TEXT, BrainfuckWindow

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>.<-.<.+++."
    "------.--------.>>+.>++."
)


@pytest.fixture(scope="module")
def app():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(app):
    w = BrainfuckWindow()
    yield w
    w.close()


def drive(window, limit=100):
    for _ in range(limit):
        if window.engine is None or not window.timer.isActive():
            return
        window.execute_slice()


def test_starts_ready(window):
    assert window.result_display.toPlainText() == READY_TEXT
    assert window.engine is None


def test_runs_program(window):
    window.code_edit.setPlainText(HELLO_WORLD)
    window.run_program()
    assert window.engine is not None
    drive(window)
    assert window.engine is None
    assert "Hello World!" in window.result_display.toPlainText()


def test_input_round_trip(window):
    window.code_edit.setPlainText(",.")
    window.run_program()
    drive(window)
    assert window.engine is not None
    assert window.engine.awaiting_input
    assert window.result_display.toPlainText().endswith("[Input] <- ")

    window.input_line.setText("Q")
    window.push_input()
    drive(window)
    assert window.engine is None
    assert window.result_display.toPlainText().endswith("Q\nQ")


def test_compile_error_is_reported(window):
    window.code_edit.setPlainText("[[")
    window.run_program()
    assert window.engine is None
    assert "[Interpreter Error: CompileError" in window.result_display.toPlainText()


def test_runtime_error_is_reported(window):
    window.code_edit.setPlainText("<")
    window.run_program()
    drive(window)
    assert window.engine is None
    assert "[Interpreter Error: Pointer shift" in window.result_display.toPlainText()


def test_stop_interrupts(window):
    window.code_edit.setPlainText("+[]")
    window.run_program()
    window.execute_slice()
    window.stop_execution()
    assert window.engine is None
    assert not window.timer.isActive()
    assert window.result_display.toPlainText().endswith("[Interrupt]")
