import io
import struct

import pytest

from coursetools.lc3vm import IllegalOpcode, Lc3VM, main, sign_extend, swap16

HALT = 0xF025


def image(*words, origin=0x3000):
    return struct.pack(f">{len(words) + 1}H", origin, *words)


def make_vm(words, stdin=b"", key_ready=None):
    vm = Lc3VM(stdin=io.BytesIO(stdin), stdout=io.BytesIO(), key_ready=key_ready)
    vm.load_image_bytes(image(*words))
    return vm


def test_sign_extend_negative():
    assert sign_extend(0x1F, 5) == 0xFFFF


@pytest.mark.parametrize("value", [0, 1, 0x0F])
def test_sign_extend_positive_unchanged(value):
    assert sign_extend(value, 5) == value


def test_swap16_value():
    assert swap16(0x1234) == 0x3412


@pytest.mark.parametrize("value", [0, 0x00FF, 0xABCD, 0xFFFF])
def test_swap16_round_trip(value):
    assert swap16(swap16(value)) == value


def test_load_image_places_words_at_origin():
    vm = Lc3VM(stdin=io.BytesIO(), stdout=io.BytesIO())
    origin = vm.load_image_bytes(image(0x1111, 0x2222, origin=0x4000))
    assert origin == 0x4000
    assert vm.memory[0x4000:0x4002] == [0x1111, 0x2222]


def test_load_image_ignores_odd_trailing_byte():
    vm = Lc3VM(stdin=io.BytesIO(), stdout=io.BytesIO())
    vm.load_image_bytes(image(0x1234) + b"\x99")
    assert vm.memory[0x3000:0x3002] == [0x1234, 0]


def test_load_image_too_short():
    vm = Lc3VM(stdin=io.BytesIO(), stdout=io.BytesIO())
    with pytest.raises(ValueError):
        vm.load_image_bytes(b"\x30")


def test_load_image_from_file(tmp_path):
    path = tmp_path / "prog.obj"
    path.write_bytes(image(HALT))
    vm = Lc3VM(stdin=io.BytesIO(), stdout=io.BytesIO())
    assert vm.load_image(str(path)) == 0x3000
    assert vm.memory[0x3000] == HALT


def test_halt_prints():
    vm = make_vm([HALT])
    vm.run()
    assert vm.stdout.getvalue() == b"HALT\n"
    assert vm.running is False


def test_add_immediate_sets_positive():
    vm = make_vm([0x5020, 0x1025, HALT])
    vm.run()
    assert vm.reg[0] == 5
    assert vm.cond == 1


def test_add_negative_sets_negative():
    vm = make_vm([0x103F, HALT])
    vm.run()
    assert vm.reg[0] == 0xFFFF
    assert vm.cond == 4


def test_branch_loop_counts_down():
    vm = make_vm([0x1023, 0x103F, 0x03FE, HALT])
    vm.run()
    assert vm.reg[0] == 0
    assert vm.cond == 2


def test_not_complements():
    vm = make_vm([0x1025, 0x923F, HALT])
    vm.run()
    assert vm.reg[1] ^ vm.reg[0] == 0xFFFF


def test_store_and_load():
    vm = make_vm([0x1027, 0x3003, 0x2602, HALT, 0, 0])
    vm.run()
    assert vm.memory[0x3005] == 7
    assert vm.reg[3] == 7


def test_jsr_and_ret():
    vm = make_vm([0x4801, HALT, 0x1261, 0xC1C0])
    vm.run()
    assert vm.reg[1] == 1
    assert vm.reg[7] == 0x3001


def test_puts():
    vm = make_vm([0xE002, 0xF022, HALT, ord("H"), ord("i"), 0])
    vm.run()
    assert vm.stdout.getvalue() == b"HiHALT\n"


def test_putsp():
    word = ord("H") | (ord("i") << 8)
    vm = make_vm([0xE002, 0xF024, HALT, word, ord("!"), 0])
    vm.run()
    assert vm.stdout.getvalue() == b"Hi!HALT\n"


def test_out():
    vm = make_vm([0x2002, 0xF021, HALT, ord("A")])
    vm.run()
    assert vm.stdout.getvalue() == b"AHALT\n"


def test_getc_reads_byte():
    vm = make_vm([0xF020, HALT], stdin=b"z")
    vm.run()
    assert vm.reg[0] == ord("z")
    assert vm.stdout.getvalue() == b"HALT\n"


def test_getc_at_end_of_input():
    vm = make_vm([0xF020, HALT])
    vm.run()
    assert vm.reg[0] == 0xFFFF


def test_in_prompts_and_echoes():
    vm = make_vm([0xF023, HALT], stdin=b"q")
    vm.run()
    assert vm.stdout.getvalue() == b"Enter a character: qHALT\n"
    assert vm.reg[0] == ord("q")


@pytest.mark.parametrize("instr", [0x8000, 0xD000])
def test_illegal_opcode(instr):
    vm = make_vm([instr])
    with pytest.raises(IllegalOpcode) as info:
        vm.step()
    assert info.value.address == 0x3000
    assert info.value.instruction == instr


def test_keyboard_status_with_key():
    vm = Lc3VM(stdin=io.BytesIO(b"k"), stdout=io.BytesIO(), key_ready=lambda: True)
    assert vm.mem_read(0xFE00) == 1 << 15
    assert vm.mem_read(0xFE02) == ord("k")


def test_keyboard_status_without_key():
    vm = Lc3VM(stdin=io.BytesIO(b"k"), stdout=io.BytesIO(), key_ready=lambda: False)
    assert vm.mem_read(0xFE00) == 0


def test_mem_write_round_trip():
    vm = Lc3VM(stdin=io.BytesIO(), stdout=io.BytesIO())
    vm.mem_write(0x4000, 0xBEEF)
    assert vm.mem_read(0x4000) == 0xBEEF


def test_main_without_arguments(capsys):
    assert main([]) == 2
    assert capsys.readouterr().out == "lc3 [image-file1] ...\n"


def test_main_missing_image(tmp_path, capsys):
    missing = str(tmp_path / "nope.obj")
    assert main([missing]) == 1
    assert capsys.readouterr().out == f"failed to load image: {missing}\n"


def test_main_runs_image(tmp_path, capsys):
    path = tmp_path / "halt.obj"
    path.write_bytes(image(HALT))
    assert main([str(path)]) == 0
    assert "HALT" in capsys.readouterr().out