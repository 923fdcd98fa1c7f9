import pytest

import architecture as arch
import framebuf as fb
import state as st


@pytest.mark.parametrize("row, col, index, value", [
    (0, 0, 0, 0x80),
    (0, 7, 0, 0x01),
    (0, 8, 1, 0x80),
    (1, 0, 8, 0x80),
    (1, 9, 9, 0x40),
    (31, 63, 255, 0x01),
])
def test_pixel_bit_order(row, col, index, value):
    es = st.MachineState()
    fb.write_pixel(es, row, col, 1)
    assert es.display[index] == value
    assert sum(1 for b in es.display if b) == 1
    assert fb.read_pixel(es, row, col) == 1
    fb.write_pixel(es, row, col, 0)
    assert fb.snapshot(es) == bytes(arch.DISPLAY_SIZE_BYTES)

def test_flip_pixel_returns_old_value():
    es = st.MachineState()
    assert fb.flip_pixel(es, 4, 4) == 0
    assert fb.read_pixel(es, 4, 4) == 1
    assert fb.flip_pixel(es, 4, 4) == 1
    assert fb.read_pixel(es, 4, 4) == 0

def test_aligned_sprite_row_is_copied_as_a_byte():
    es = st.MachineState()
    assert fb.draw_sprite(es, 8, 2, [0xA5]) == 0
    assert es.display[2 * 8 + 1] == 0xA5

def test_sprite_collision_only_when_pixel_turns_off():
    es = st.MachineState()
    fb.draw_sprite(es, 0, 0, [0x0F])
    assert fb.draw_sprite(es, 0, 0, [0xF0]) == 0
    assert es.display[0] == 0xFF
    assert fb.draw_sprite(es, 0, 0, [0x01]) == 1
    assert es.display[0] == 0xFE

def test_unaligned_sprite_spans_two_bytes():
    es = st.MachineState()
    fb.draw_sprite(es, 4, 0, [0xFF])
    assert es.display[0] == 0x0F
    assert es.display[1] == 0xF0

def test_clear_display():
    es = st.MachineState()
    fb.draw_sprite(es, 10, 10, [0xFF] * 8)
    fb.clear_display(es)
    assert fb.snapshot(es) == bytes(256)

def test_show_display():
    es = st.MachineState()
    fb.write_pixel(es, 0, 1, 1)
    lines = fb.show_display(es).split("\n")
    assert len(lines) == arch.DISPLAY_HEIGHT
    assert all(len(line) == arch.DISPLAY_WIDTH for line in lines)
    assert lines[0].startswith(".#..")
    assert set("".join(lines[1:])) == {"."}

def test_frame_pixel_reads_snapshots():
    es = st.MachineState()
    fb.write_pixel(es, 5, 17, 1)
    frame = fb.snapshot(es)
    fb.clear_display(es)
    assert fb.frame_pixel(frame, 5, 17) == 1
    assert fb.read_pixel(es, 5, 17) == 0
