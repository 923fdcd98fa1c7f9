import sys
import time
from PySide6.QtCore import QEvent, QObject, Signal, QThread, QMutex
from PySide6.QtGui import QAction, QIcon
from PySide6.QtWidgets import QApplication, QMainWindow, QFileDialog, QToolBar

import common
import architecture as arch
import emulator
import framebuf
import loader
import state
from display_view import DisplayView

class EmulatorWorker(QObject):
    frame_ready = Signal(object, bool)
    execution_finished = Signal(str)

    # The machine is shared with the GUI thread, which writes the
    # keypad. Every frame (a slice of instructions, one timer tick, and
    # the display snapshot) runs while holding the mutex, and so does
    # every keypad write.

    def __init__(self, emulator_state, mutex, instructions_per_frame):
        super().__init__()
        self.es = emulator_state
        self._mutex = mutex
        self.instructions_per_frame = instructions_per_frame
        self._stop_requested = False

    def run(self):
        self._stop_requested = False
        frame_time = 1.0 / common.frame_rate
        while not self._stop_requested:
            start = time.monotonic()
            self._mutex.lock()
            try:
                message = self.run_frame()
                frame = framebuf.snapshot(self.es)
                sound_on = emulator.sound_active(self.es)
            finally:
                self._mutex.unlock()
            self.frame_ready.emit(frame, sound_on)
            if message:
                self.execution_finished.emit(message)
                break
            delay = frame_time - (time.monotonic() - start)
            if delay > 0:
                time.sleep(delay)

    def run_frame(self):
        for _ in range(self.instructions_per_frame):
            result = emulator.execute_instruction(self.es)
            if result.kind == state.EX_BLOCKED:
                break
            if result.is_error:
                return f"Emulator stopped: {result.show()}"
        emulator.timer_tick(self.es)
        return None

    def stop(self):
        self._stop_requested = True

class MainWindow(QMainWindow):
    def __init__(self, instructions_per_frame=common.default_instructions_per_frame,
                 scale=common.default_scale):
        super().__init__()
        self.setWindowTitle("Chip8Py")

        self.es = state.MachineState()
        self.mutex = QMutex()
        self.instructions_per_frame = instructions_per_frame
        self.image = None
        self.current_file = None
        self.sound_was_on = False

        self.display_view = DisplayView(scale)
        self.setCentralWidget(self.display_view)

        # Create Toolbar
        self.toolbar = QToolBar("Main Toolbar")
        self.addToolBar(self.toolbar)

        open_action = QAction(QIcon.fromTheme("document-open"), "Open...", self)
        open_action.triggered.connect(self.open_file)
        self.toolbar.addAction(open_action)

        self.run_action = QAction(QIcon.fromTheme("media-playback-start"), "Run", self)
        self.run_action.triggered.connect(self.run_program)
        self.run_action.setEnabled(False) # Enabled once a program is loaded
        self.toolbar.addAction(self.run_action)

        self.pause_action = QAction(QIcon.fromTheme("media-playback-pause"), "Pause", self)
        self.pause_action.triggered.connect(self.pause_execution)
        self.pause_action.setEnabled(False)
        self.toolbar.addAction(self.pause_action)

        self.reset_action = QAction(QIcon.fromTheme("view-refresh"), "Reset", self)
        self.reset_action.triggered.connect(self.reset_emulator)
        self.reset_action.setEnabled(False)
        self.toolbar.addAction(self.reset_action)

        self.emulator_thread = None
        self.emulator_worker = None
        self.statusBar().showMessage("Open a program to start")

    # Worker thread management

    def start_worker(self):
        self.emulator_thread = QThread()
        self.emulator_worker = EmulatorWorker(self.es, self.mutex, self.instructions_per_frame)
        self.emulator_worker.moveToThread(self.emulator_thread)
        self.emulator_thread.started.connect(self.emulator_worker.run)
        self.emulator_worker.frame_ready.connect(self.on_frame_ready)
        self.emulator_worker.execution_finished.connect(self.on_execution_finished)
        self.emulator_thread.start()

    def stop_worker(self):
        if self.emulator_worker:
            self.emulator_worker.stop() # Request worker to leave its loop
            self.emulator_thread.quit()
            self.emulator_thread.wait()
            self.emulator_thread = None
            self.emulator_worker = None

    # Program loading

    def load_file(self, file_name):
        try:
            image = loader.read_image(file_name)
            self.stop_worker()
            self.mutex.lock()
            try:
                loader.boot(self.es, image)
            finally:
                self.mutex.unlock()
        except (OSError, ValueError) as e:
            self.statusBar().showMessage(f"Error opening file: {e}")
            return False
        self.image = image
        self.current_file = file_name
        self.setWindowTitle(f"Chip8Py - {file_name}")
        self.display_view.set_frame(framebuf.snapshot(self.es))
        self.statusBar().showMessage(f"Loaded {len(image)} bytes")
        self.set_running(False)
        return True

    def open_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Program Image", ".", "CHIP-8 Programs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            self.load_file(file_name)

    # Controls

    def set_running(self, running):
        self.run_action.setEnabled(not running and self.image is not None)
        self.pause_action.setEnabled(running)
        self.reset_action.setEnabled(self.image is not None)

    def run_program(self):
        if self.image is None:
            return
        self.start_worker()
        self.set_running(True)
        self.statusBar().showMessage("Running")

    def pause_execution(self):
        self.stop_worker()
        self.set_running(False)
        self.statusBar().showMessage("Paused")

    def reset_emulator(self):
        self.stop_worker()
        if self.image is not None:
            loader.boot(self.es, self.image)
        self.display_view.set_frame(framebuf.snapshot(self.es))
        self.set_running(False)
        self.statusBar().showMessage("Emulator reset.")

    def on_frame_ready(self, frame, sound_on):
        if sound_on and not self.sound_was_on:
            QApplication.beep()
        self.sound_was_on = sound_on
        self.display_view.set_frame(frame, sound_on)

    def on_execution_finished(self, message):
        self.stop_worker()
        self.set_running(False)
        self.statusBar().showMessage(message)

    # Keypad input

    def set_key(self, event, down):
        k = arch.host_key_to_keypad(event.text())
        if k is None or event.isAutoRepeat():
            return False
        self.mutex.lock()
        try:
            if down:
                self.es.press_key(k)
            else:
                self.es.release_key(k)
        finally:
            self.mutex.unlock()
        return True

    def keyPressEvent(self, event):
        if not self.set_key(event, True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if not self.set_key(event, False):
            super().keyReleaseEvent(event)

    # Release events never arrive for keys held while the window loses
    # focus, so every key is lifted when it is deactivated.

    def changeEvent(self, event):
        if event.type() == QEvent.ActivationChange and not self.isActiveWindow():
            self.mutex.lock()
            try:
                self.es.release_all_keys()
            finally:
                self.mutex.unlock()
        super().changeEvent(event)

    def closeEvent(self, event):
        self.stop_worker()
        super().closeEvent(event)

def start_gui(file_path=None, instructions_per_frame=common.default_instructions_per_frame,
              scale=common.default_scale):
    app = QApplication(sys.argv[:1])
    app.setStyleSheet("""
    QMainWindow {
        background-color: #1a1a1a;
        color: #e0e0e0;
    }
    QToolBar {
        background-color: #2a2a2a;
        border: none;
        padding: 5px;
    }
    QToolButton {
        background-color: transparent;
        border: none;
        padding: 5px;
        color: #e0e0e0;
    }
    QToolButton:hover {
        background-color: #005f99;
        border-radius: 3px;
    }
    QStatusBar {
        background-color: #2a2a2a;
        color: #e0e0e0;
    }
    """)
    window = MainWindow(instructions_per_frame, scale)
    if file_path:
        window.load_file(file_path)
    window.show()
    return app.exec()
