from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QColor
from PySide6.QtCore import Qt, QRect

import architecture as arch
import framebuf as fb

class DisplayView(QWidget):
    """Draws a frame buffer snapshot, each CHIP-8 pixel a scale x scale square."""

    def __init__(self, scale, parent=None):
        super().__init__(parent)
        self.scale = scale
        self.frame = bytes(arch.DISPLAY_SIZE_BYTES)
        self.sound_on = False
        self.setFixedSize(arch.DISPLAY_WIDTH * scale, arch.DISPLAY_HEIGHT * scale)
        self.setFocusPolicy(Qt.StrongFocus)

    def set_frame(self, frame, sound_on=False):
        self.frame = frame
        self.sound_on = sound_on
        self.update() # Schedules a paintEvent call

    def paintEvent(self, event):
        painter = QPainter(self)

        background_color = QColor("#1a1a1a")
        pixel_color = QColor("#00ff00") # Green phosphor
        sound_color = QColor("#ff8c00") # Orange while the sound timer runs

        painter.fillRect(self.rect(), background_color)

        color = sound_color if self.sound_on else pixel_color
        s = self.scale
        for row in range(arch.DISPLAY_HEIGHT):
            for col in range(arch.DISPLAY_WIDTH):
                if fb.frame_pixel(self.frame, row, col):
                    painter.fillRect(QRect(col * s, row * s, s, s), color)

        painter.end()
