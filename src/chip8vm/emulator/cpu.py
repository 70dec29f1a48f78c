"""
CHIP-8 VM Core
==============

Registers, call stack, timers and the fetch-decode-execute cycle.

Register file:
- V0-VF: 8-bit general registers. VF doubles as the carry, borrow,
  shifted-out bit and sprite collision flag
- I: 16-bit index register
- PC: 16-bit program counter, starts at $200
- SP: stack pointer into a 16-entry stack of return addresses
- DT, ST: 8-bit delay and sound timers, decremented at 60 Hz

The core is driven from outside by two events:
- step(): executes one instruction (one instruction-clock tick)
- timer_tick(): decrements the timers and gates the buzzer (one 60 Hz tick)

Historical quirks reproduced exactly:
- CALL pushes the address of the CALL itself; RET pops it and adds 2
- 8xy6/8xyE shift Vx in place, ignoring Vy
- Fx55/Fx65 leave I unchanged
- Fx1E sets no flag when I passes $FFF
- For 8xy4/8xy5/8xy7 the flag is written after the result, so VF as
  the destination ends up holding the flag; for shifts the flag is written
  first and then overwritten by the result

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from ..errors import StackError
from .buzzer import BuzzerProtocol
from .decoder import Instruction, Op, decode
from .display import Framebuffer
from .keyboard import KeyState
from .memory import Memory, PROGRAM_START

logger = logging.getLogger(__name__)


STACK_DEPTH = 16
FLAG = 0xF  # VF


@dataclass
class CPUState:
    """
    Complete register state.

    All values stored as Python ints but represent:
    - v: sixteen 8-bit registers
    - i, pc: 16-bit unsigned
    - sp: number of entries on the stack (0-16)
    - stack: sixteen 16-bit return addresses
    - delay_timer, sound_timer: 8-bit unsigned
    """
    v: bytearray = field(default_factory=lambda: bytearray(16))
    i: int = 0
    pc: int = PROGRAM_START
    sp: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0


class CPU:
    """
    CHIP-8 interpreter core.

    Example:
        >>> memory = Memory(bytes([0x6A, 0x3C]))
        >>> cpu = CPU(memory, Framebuffer(), KeyState(), Buzzer())
        >>> cpu.step().mnemonic
        'LD VA, 0x3C'
        >>> hex(cpu.v[0xA]), hex(cpu.pc)
        ('0x3c', '0x202')
    """

    def __init__(
        self,
        memory: Memory,
        framebuffer: Framebuffer,
        keys: KeyState,
        buzzer: BuzzerProtocol,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize CPU with its peripherals.

        Args:
            memory: Address space holding font and program
            framebuffer: Display target of CLS and DRW
            keys: Keypad state and wait-for-key machine
            buzzer: Tone output gated by the sound timer
            rng: Random source for RND (default: new random.Random())
        """
        self.memory = memory
        self.framebuffer = framebuffer
        self.keys = keys
        self.buzzer = buzzer
        self.rng = rng or random.Random()
        self.state = CPUState()

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> bytearray:
        """General registers V0-VF."""
        return self.state.v

    @property
    def i(self) -> int:
        """Index register I (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def sp(self) -> int:
        """Stack pointer (number of stacked return addresses)."""
        return self.state.sp

    @property
    def stack(self) -> list[int]:
        """Return addresses currently on the stack, oldest first."""
        return self.state.stack[:self.state.sp]

    @property
    def delay_timer(self) -> int:
        return self.state.delay_timer

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self.state.delay_timer = value & 0xFF

    @property
    def sound_timer(self) -> int:
        return self.state.sound_timer

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self.state.sound_timer = value & 0xFF

    @property
    def is_waiting(self) -> bool:
        """True while suspended by Fx0A."""
        return self.keys.is_waiting

    # ========================================
    # Stack Operations
    # ========================================

    def _push(self, address: int) -> None:
        if self.state.sp >= STACK_DEPTH:
            raise StackError("Stack overflow", self.pc)
        self.state.stack[self.state.sp] = address
        self.state.sp += 1

    def _pop(self) -> int:
        if self.state.sp == 0:
            raise StackError("Stack underflow", self.pc)
        self.state.sp -= 1
        return self.state.stack[self.state.sp]

    # ========================================
    # Main Execution
    # ========================================

    def fetch(self) -> Instruction:
        """Decode the instruction at PC without executing it."""
        return decode(self.memory.load_word(self.pc), self.pc)

    def step(self) -> Optional[Instruction]:
        """
        Execute exactly one instruction.

        Returns:
            The executed Instruction, or None if suspended by Fx0A

        Raises:
            UnsupportedInstructionError: If the word at PC does not decode
            MemoryAccessError: If the instruction touches memory out of range
            StackError: On call stack overflow or underflow
        """
        if self.keys.is_waiting:
            return None

        instruction = self.fetch()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"{self.pc:04X}: {instruction.mnemonic:<16} "
                f"I={self.i:04X} V={self.v.hex(' ').upper()}"
            )
        self.execute(instruction)
        return instruction

    def timer_tick(self) -> None:
        """
        Advance the 60 Hz timers.

        The buzzer is commanded on every tick: ON while the sound timer was
        positive at the start of the tick, OFF otherwise.
        """
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1

        if self.state.sound_timer > 0:
            self.buzzer.on()
            self.state.sound_timer -= 1
        else:
            self.buzzer.off()

    def press_key(self, key: int) -> None:
        """
        Apply a keypad press, resolving a pending Fx0A wait.

        Args:
            key: Keypad value (0x0-0xF)
        """
        register = self.keys.press(key)
        if register is not None:
            self.v[register] = key

    def release_key(self, key: int) -> None:
        """Apply a keypad release. Never resolves a wait."""
        self.keys.release(key)

    def execute(self, instruction: Instruction) -> None:
        """
        Apply a decoded instruction to the machine state.

        Args:
            instruction: Instruction from decode()
        """
        v = self.state.v
        x, y = instruction.x, instruction.y
        kk, nnn = instruction.kk, instruction.nnn

        match instruction.op:
            # ============================================
            # Flow Control
            # ============================================
            case Op.CLS:
                self.framebuffer.clear()
                self.pc += 2
            case Op.RET:
                self.pc = self._pop() + 2
            case Op.JP:
                self.pc = nnn
            case Op.CALL:
                self._push(self.pc)
                self.pc = nnn
            case Op.JP_V0:
                self.pc = nnn + v[0]

            # ============================================
            # Conditional Skips
            # ============================================
            case Op.SE_BYTE:
                self._skip_if(v[x] == kk)
            case Op.SNE_BYTE:
                self._skip_if(v[x] != kk)
            case Op.SE_REG:
                self._skip_if(v[x] == v[y])
            case Op.SNE_REG:
                self._skip_if(v[x] != v[y])
            case Op.SKP:
                self._skip_if(self.keys.is_pressed(v[x]))
            case Op.SKNP:
                self._skip_if(not self.keys.is_pressed(v[x]))

            # ============================================
            # Register Loads and Arithmetic
            # ============================================
            case Op.LD_BYTE:
                v[x] = kk
                self.pc += 2
            case Op.ADD_BYTE:
                v[x] = (v[x] + kk) & 0xFF
                self.pc += 2
            case Op.LD_REG:
                v[x] = v[y]
                self.pc += 2
            case Op.OR:
                v[x] = v[x] | v[y]
                self.pc += 2
            case Op.AND:
                v[x] = v[x] & v[y]
                self.pc += 2
            case Op.XOR:
                v[x] = v[x] ^ v[y]
                self.pc += 2
            case Op.ADD_REG:
                total = v[x] + v[y]
                v[x] = total & 0xFF
                v[FLAG] = 1 if total > 0xFF else 0
                self.pc += 2
            case Op.SUB:
                vx, vy = v[x], v[y]
                v[x] = (vx - vy) & 0xFF
                v[FLAG] = 1 if vx >= vy else 0
                self.pc += 2
            case Op.SUBN:
                vx, vy = v[x], v[y]
                v[x] = (vy - vx) & 0xFF
                v[FLAG] = 1 if vy >= vx else 0
                self.pc += 2
            case Op.SHR:
                vx = v[x]
                v[FLAG] = vx & 0x01
                v[x] = vx >> 1
                self.pc += 2
            case Op.SHL:
                vx = v[x]
                v[FLAG] = (vx >> 7) & 0x01
                v[x] = (vx << 1) & 0xFF
                self.pc += 2
            case Op.RND:
                v[x] = self.rng.randrange(0x100) & kk
                self.pc += 2

            # ============================================
            # Index Register and Memory
            # ============================================
            case Op.LD_I:
                self.i = nnn
                self.pc += 2
            case Op.ADD_I_VX:
                self.i = self.i + v[x]
                self.pc += 2
            case Op.LD_F_VX:
                self.i = Memory.font_addr(v[x])
                self.pc += 2
            case Op.LD_B_VX:
                value = v[x]
                self.memory.store(self.i, value // 100)
                self.memory.store(self.i + 1, (value // 10) % 10)
                self.memory.store(self.i + 2, value % 10)
                self.pc += 2
            case Op.LD_MEM_VX:
                for offset in range(x + 1):
                    self.memory.store(self.i + offset, v[offset])
                self.pc += 2
            case Op.LD_VX_MEM:
                for offset in range(x + 1):
                    v[offset] = self.memory.load(self.i + offset)
                self.pc += 2

            # ============================================
            # Display
            # ============================================
            case Op.DRW:
                sprite = self.memory.load_sprite(self.i, instruction.n)
                collision = self.framebuffer.draw_sprite(v[x], v[y], sprite)
                v[FLAG] = 1 if collision else 0
                self.pc += 2

            # ============================================
            # Timers and Keypad
            # ============================================
            case Op.LD_VX_DT:
                v[x] = self.state.delay_timer
                self.pc += 2
            case Op.LD_DT_VX:
                self.delay_timer = v[x]
                self.pc += 2
            case Op.LD_ST_VX:
                self.sound_timer = v[x]
                self.pc += 2
            case Op.LD_VX_K:
                self.keys.await_key(x)
                self.pc += 2

    def _skip_if(self, condition: bool) -> None:
        """Skip the next instruction when condition holds."""
        self.pc += 4 if condition else 2
