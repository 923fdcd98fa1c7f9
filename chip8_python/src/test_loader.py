import pytest

import architecture as arch
import loader
import state as st


def test_words_to_image_is_big_endian():
    assert loader.words_to_image([0x6A05, 0x00E0]) == bytes([0x6A, 0x05, 0x00, 0xE0])

def test_boot_installs_font_and_image():
    es = st.MachineState()
    es.V[3] = 9
    es.press_key(4)
    loader.boot(es, bytes([0x12, 0x00]))
    a = arch.FONT_START_ADDRESS
    assert list(es.memory[a:a + 80]) == arch.font_sprites
    assert es.memory[0x200] == 0x12 and es.memory[0x201] == 0x00
    assert es.pc == 0x200
    assert es.V[3] == 0
    assert not any(es.keypad)
    assert es.status == st.STATUS_READY

def test_boot_image_filling_memory():
    image = bytes(range(256)) * 14  # 3584 bytes, exactly 4096 - 0x200
    es = st.MachineState()
    loader.boot(es, image)
    assert es.memory[4095] == 255
    assert len(es.memory) == arch.MEMORY_SIZE

def test_boot_rejects_oversized_image():
    es = st.MachineState()
    loader.boot(es, bytes([0x6A, 0x05]))
    with pytest.raises(ValueError):
        loader.boot(es, bytes(loader.max_image_size() + 1))
    # A failed boot leaves the previous program in place
    assert es.memory[0x200] == 0x6A
    assert len(es.memory) == arch.MEMORY_SIZE

def test_read_image(tmp_path):
    path = tmp_path / "prog.ch8"
    path.write_bytes(bytes([0x00, 0xE0, 0x12, 0x02]))
    assert loader.read_image(str(path)) == bytes([0x00, 0xE0, 0x12, 0x02])

def test_read_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        loader.read_image(str(tmp_path / "missing.ch8"))
