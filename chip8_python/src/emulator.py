# emulator.py

# Copyright (C) 2025 The Chip8Py authors. License: GNU GPL Version 3
# See README.md and LICENSE in the Chip8Py distribution.

# This file is part of Chip8Py. Chip8Py is free software: you can
# redistribute it and/or modify it under the terms of the GNU General
# Public License as published by the Free Software Foundation, either
# version 3 of the License, or (at your option) any later version.
# Chip8Py is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details. You should have received
# a copy of the GNU General Public License along with Chip8Py. If
# not, see <https://www.gnu.org/licenses/>.

# -------------------------------------------------------------------------
# emulator.py defines the machine language semantics
# -------------------------------------------------------------------------

import common
import architecture as arch
import arithmetic as arith
import framebuf as fb
import state as st

# -------------------------------------------------------------------------
# Initialize machine state
# -------------------------------------------------------------------------

def proc_reset(es):
    common.mode.devlog("reset the processor")
    es.clear()

# -------------------------------------------------------------------------
# Fetch instruction
# -------------------------------------------------------------------------

# The instruction at pc is two bytes, high byte first. fetch returns
# None without moving pc when either byte lies outside memory.

def fetch_in_bounds(a):
    return 0 <= a <= arch.MEMORY_SIZE - 2

def fetch(es):
    a = es.pc
    if not fetch_in_bounds(a):
        common.mode.devlog(f"fetch out of bounds pc={arith.word_to_hex4(a)}")
        return None
    x = (es.memory[a] << 8) | es.memory[a + 1]
    es.pc = arith.incr_address(a, 2)
    return x

# -------------------------------------------------------------------------
# Decode instruction
# -------------------------------------------------------------------------

class Instruction:
    def __init__(self, code, tag):
        self.code = code
        self.tag = tag
        self.x = arch.field_x(code)
        self.y = arch.field_y(code)
        self.n = arch.field_n(code)
        self.kk = arch.field_kk(code)
        self.nnn = arch.field_nnn(code)

    def show(self):
        return f"{arith.word_to_hex4(self.code)} {self.tag} x={self.x} y={self.y}" \
               f" n={self.n} kk={arith.byte_to_hex2(self.kk)} nnn={arith.word_to_hex3(self.nnn)}"

# The top nibble selects the family. Families 0, 5, 8, 9, e and f look
# at a secondary field; the result is None for words with no tag.

def decode_tag(code):
    op = arch.field_op(code)
    if op == 0x0:
        return arch.family_0.get(arch.field_nnn(code), arch.iSYS)
    elif op == 0x5:
        return arch.family_5.get(arch.field_n(code))
    elif op == 0x8:
        return arch.family_8.get(arch.field_n(code))
    elif op == 0x9:
        return arch.family_9.get(arch.field_n(code))
    elif op == 0xE:
        return arch.family_e.get(arch.field_kk(code))
    elif op == 0xF:
        return arch.family_f.get(arch.field_kk(code))
    else:
        return arch.family_primary[op]

def decode(code):
    return Instruction(code, decode_tag(code))

# -------------------------------------------------------------------------
# Controlling instruction execution
# -------------------------------------------------------------------------

def execute_instruction(es):
    """Run one fetch-decode-execute cycle and return a StepResult.

    A cycle that fails leaves the machine as it was before the cycle,
    with pc pointing at the offending instruction. A key wait (fx0a)
    with no key down also leaves pc at the instruction, so the driver
    simply keeps stepping.
    """
    executed_instr_addr = es.pc
    es.cur_instr_addr = executed_instr_addr

    code = fetch(es)
    if code is None:
        return finish_instruction(es, st.StepResult(st.EX_ADDRESS_ERROR, executed_instr_addr))

    ins = decode(code)
    common.mode.devlog(f"execute {arith.word_to_hex4(executed_instr_addr)}: {ins.show()}")
    kind = dispatch(es, ins)
    if kind != st.EX_OK and kind != st.EX_BLOCKED:
        es.pc = executed_instr_addr
    return finish_instruction(es, st.StepResult(kind, executed_instr_addr, code, ins.tag))

def dispatch(es, ins):
    if ins.tag is None:
        return st.EX_UNKNOWN_INSTRUCTION
    kind = dispatch_table[ins.tag](es, ins)
    return st.EX_OK if kind is None else kind

def finish_instruction(es, result):
    if result.ok:
        es.instr_count += 1
        es.status = st.STATUS_RUNNING
    elif result.kind == st.EX_BLOCKED:
        es.status = st.STATUS_BLOCKED
    else:
        es.status = st.STATUS_ERROR
        common.mode.errlog(f"instruction failed: {result.show()}")
    return result

# A headless driver. Instruction cycles and timer ticks are interleaved
# on the caller's thread: one tick after every instructions_per_tick
# cycles. The loop stops at the first cycle that does not complete
# (error, or a key wait, since nothing can press a key meanwhile), at a
# jump to itself, which is how programs conventionally end, or when
# max_instructions cycles have run. Returns the last StepResult.

def run(es, max_instructions=common.default_cycle_limit,
        instructions_per_tick=common.default_instructions_per_frame,
        stop_on_self_jump=True):
    es.status = st.STATUS_RUNNING
    result = None
    icount = 0
    while icount < max_instructions:
        result = execute_instruction(es)
        icount += 1
        if not result.ok:
            break
        if stop_on_self_jump and result.tag == arch.iJP and es.pc == result.address:
            common.mode.devlog(f"jump to self at {arith.word_to_hex4(es.pc)}, halting")
            es.status = st.STATUS_HALTED
            break
        if icount % instructions_per_tick == 0:
            timer_tick(es)
    common.mode.devlog(f"run finished after {icount} instructions")
    return result

# -------------------------------------------------------------------------
# Timers
# -------------------------------------------------------------------------

# Called by the driver at 60 Hz; the instructions never decrement the
# timers themselves.

def timer_tick(es):
    if es.delay_timer > 0:
        es.delay_timer -= 1
    if es.sound_timer > 0:
        es.sound_timer -= 1

def sound_active(es):
    return es.sound_timer > 0

# -------------------------------------------------------------------------
# Instruction pattern functions
# -------------------------------------------------------------------------

# Register-register operations that write a flag. f returns
# [primary, secondary] computed from the operands; primary goes to Vx
# and then secondary to VF, so when x is f the flag is what remains.

def xy_f(f):
    def inner(es, ins):
        a = es.V[ins.x]
        b = es.V[ins.y]
        primary, secondary = f(a, b)
        es.V[ins.x] = primary
        es.V[arch.FLAG_REGISTER] = secondary
    return inner

def x_f(f):
    def inner(es, ins):
        a = es.V[ins.x]
        primary, secondary = f(a)
        es.V[ins.x] = primary
        es.V[arch.FLAG_REGISTER] = secondary
    return inner

# Register-register operations without a flag

def xy(f):
    def inner(es, ins):
        es.V[ins.x] = f(es.V[ins.x], es.V[ins.y])
    return inner

# Conditional skips over the next instruction

def skip_if(cond):
    def inner(es, ins):
        if cond(es, ins):
            es.pc = arith.incr_address(es.pc, 2)
    return inner

# -------------------------------------------------------------------------
# Machine language semantics
# -------------------------------------------------------------------------

def op_sys(es, ins):
    common.mode.devlog(f"op_sys {arith.word_to_hex3(ins.nnn)} ignored")

def op_cls(es, ins):
    fb.clear_display(es)

# sp counts the stack entries in use, so it indexes the next free slot
# rather than the top; return addresses live in stack[0..sp). A call
# with all 16 entries in use, or a return with none, fails without
# touching the stack.

def op_ret(es, ins):
    if es.sp == 0:
        return st.EX_STACK_UNDERFLOW
    es.sp -= 1
    es.pc = es.stack[es.sp]

def op_call(es, ins):
    if es.sp >= arch.STACK_SIZE:
        return st.EX_STACK_OVERFLOW
    es.stack[es.sp] = es.pc
    es.sp += 1
    es.pc = ins.nnn

def op_jp(es, ins):
    es.pc = ins.nnn

def op_jp_v0(es, ins):
    target = ins.nnn + es.V[0]
    if target >= arch.MEMORY_SIZE:
        return st.EX_ADDRESS_ERROR
    es.pc = target

def op_ld_byte(es, ins):
    es.V[ins.x] = ins.kk

def op_add_byte(es, ins):
    es.V[ins.x] = arith.op_add_byte(es.V[ins.x], ins.kk)

def op_ld_reg(es, ins):
    es.V[ins.x] = es.V[ins.y]

def op_ld_i(es, ins):
    es.I = ins.nnn

def op_rnd(es, ins):
    es.V[ins.x] = arith.limit8(es.random_byte()) & ins.kk

# Dxyn reads n sprite rows starting at I and draws them at (Vx, Vy).
# Both coordinates are read before VF is written.

def op_drw(es, ins):
    if es.I + ins.n > arch.MEMORY_SIZE:
        return st.EX_ADDRESS_ERROR
    x = es.V[ins.x] % arch.DISPLAY_WIDTH
    y = es.V[ins.y] % arch.DISPLAY_HEIGHT
    rows = es.memory[es.I:es.I + ins.n]
    es.V[arch.FLAG_REGISTER] = fb.draw_sprite(es, x, y, rows)

def key_down(es, ins):
    return es.keypad[es.V[ins.x] & 0x0F] != 0

def op_ld_vx_dt(es, ins):
    es.V[ins.x] = es.delay_timer

# Fx0a takes the lowest numbered key that is down. With no key down the
# instruction is retried: pc is moved back onto it.

def op_ld_vx_k(es, ins):
    for k in range(arch.N_KEYS):
        if es.keypad[k]:
            es.V[ins.x] = k
            return None
    es.pc = es.cur_instr_addr
    return st.EX_BLOCKED

def op_ld_dt_vx(es, ins):
    es.delay_timer = es.V[ins.x]

def op_ld_st_vx(es, ins):
    es.sound_timer = es.V[ins.x]

def op_add_i(es, ins):
    es.I = arith.limit16(es.I + es.V[ins.x])

def op_ld_f(es, ins):
    es.I = arch.font_address(es.V[ins.x])

def op_ld_b(es, ins):
    if es.I + 3 > arch.MEMORY_SIZE:
        return st.EX_ADDRESS_ERROR
    digits = arith.op_bcd(es.V[ins.x])
    for i in range(3):
        es.memory[es.I + i] = digits[i]

# Fx55 and fx65 transfer V0..Vx and leave I unchanged

def op_ld_mem(es, ins):
    if es.I + ins.x + 1 > arch.MEMORY_SIZE:
        return st.EX_ADDRESS_ERROR
    for i in range(ins.x + 1):
        es.memory[es.I + i] = es.V[i]

def op_ld_regs(es, ins):
    if es.I + ins.x + 1 > arch.MEMORY_SIZE:
        return st.EX_ADDRESS_ERROR
    for i in range(ins.x + 1):
        es.V[i] = es.memory[es.I + i]

dispatch_table = {
    arch.iSYS: op_sys,
    arch.iCLS: op_cls,
    arch.iRET: op_ret,
    arch.iJP: op_jp,
    arch.iCALL: op_call,
    arch.iSE_BYTE: skip_if(lambda es, ins: es.V[ins.x] == ins.kk),
    arch.iSNE_BYTE: skip_if(lambda es, ins: es.V[ins.x] != ins.kk),
    arch.iSE_REG: skip_if(lambda es, ins: es.V[ins.x] == es.V[ins.y]),
    arch.iLD_BYTE: op_ld_byte,
    arch.iADD_BYTE: op_add_byte,
    arch.iLD_REG: op_ld_reg,
    arch.iOR: xy(arith.op_or),
    arch.iAND: xy(arith.op_and),
    arch.iXOR: xy(arith.op_xor),
    arch.iADD_REG: xy_f(arith.op_add),
    arch.iSUB: xy_f(arith.op_sub),
    arch.iSHR: x_f(arith.op_shr),
    arch.iSUBN: xy_f(arith.op_subn),
    arch.iSHL: x_f(arith.op_shl),
    arch.iSNE_REG: skip_if(lambda es, ins: es.V[ins.x] != es.V[ins.y]),
    arch.iLD_I: op_ld_i,
    arch.iJP_V0: op_jp_v0,
    arch.iRND: op_rnd,
    arch.iDRW: op_drw,
    arch.iSKP: skip_if(key_down),
    arch.iSKNP: skip_if(lambda es, ins: not key_down(es, ins)),
    arch.iLD_VX_DT: op_ld_vx_dt,
    arch.iLD_VX_K: op_ld_vx_k,
    arch.iLD_DT_VX: op_ld_dt_vx,
    arch.iLD_ST_VX: op_ld_st_vx,
    arch.iADD_I: op_add_i,
    arch.iLD_F: op_ld_f,
    arch.iLD_B: op_ld_b,
    arch.iLD_MEM: op_ld_mem,
    arch.iLD_REGS: op_ld_regs,
}

# -------------------------------------------------------------------------
# Register summary
# -------------------------------------------------------------------------

def dump_registers(es):
    print("\n--- Registers ---")
    for i in range(0, arch.N_REGISTERS, 4):
        print("  ".join(f"V{j:X}={arith.byte_to_hex2(es.V[j])}" for j in range(i, i + 4)))
    print(f"I={arith.word_to_hex4(es.I)}  pc={arith.word_to_hex4(es.pc)}  sp={es.sp}")
    print(f"delay={es.delay_timer}  sound={es.sound_timer}")
    if es.sp > 0:
        print("stack: " + " ".join(arith.word_to_hex4(a) for a in es.stack[:es.sp]))
    print(f"{es.instr_count} instructions executed, status {st.show_status(es.status)}")
    print("-----------------")
