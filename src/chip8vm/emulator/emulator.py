"""
CHIP-8 VM - Main Orchestrator
=============================

This module provides the main `Emulator` class that wires all components
together and drives them from the scheduler.

The Emulator class:
- Builds memory, framebuffer, keypad, buzzer and CPU from a ROM image
- Owns the scheduler that merges clock, timer and render ticks
- Accepts key events from any thread through a thread-safe inbox
- Dispatches exactly one tick at a time to the CPU

Example usage:
    >>> from chip8vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator.from_file("pong.ch8", EmulatorConfig(clock_hz=500))
    >>> emu.run(on_render=lambda snapshot: ..., max_ticks=10_000)

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import logging
import queue
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from .buzzer import Buzzer, BuzzerProtocol
from .cpu import CPU
from .decoder import Instruction
from .display import Framebuffer, Snapshot
from .keyboard import KeyEvent, KeyEventType, KeyState
from .memory import Memory
from .models import DisplayColor, get_color
from .scheduler import Clock, Scheduler, Tick, TickKind, RENDER_HZ

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        clock_hz: Instruction clock rate, 1-500 Hz. Default is 500.
        color: Pixel color name ("white", "green", "amber")
        render_hz: Render tick rate

    Example:
        >>> config = EmulatorConfig(clock_hz=250, color="amber")
    """
    clock_hz: int = 500
    color: str = "white"
    render_hz: int = RENDER_HZ


RenderCallback = Callable[[Snapshot], None]


class Emulator:
    """
    CHIP-8 virtual machine with scheduling and input plumbing.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        memory: 4 KB address space
        framebuffer: 64 x 32 display grid
        keys: Keypad state
        buzzer: Tone output
        cpu: The VM core
        scheduler: Merged tick source

    Example:
        >>> emu = Emulator(bytes([0x00, 0xE0]))
        >>> emu.step().mnemonic
        'CLS'
        >>> hex(emu.cpu.pc)
        '0x202'
    """

    def __init__(
        self,
        rom: bytes,
        config: Optional[EmulatorConfig] = None,
        buzzer: Optional[BuzzerProtocol] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the emulator with a program.

        Args:
            rom: Raw program bytes
            config: EmulatorConfig. If None, uses defaults.
            buzzer: Tone output (default: device-independent Buzzer)
            rng: Random source for RND
            clock: Scheduler time source (default: real time)

        Raises:
            ConfigurationError: If the clock rate or color is invalid
            RomSizeError: If the program does not fit
        """
        self.config = config or EmulatorConfig()
        self._pixel_color = get_color(self.config.color)
        self.scheduler = Scheduler(
            self.config.clock_hz,
            render_hz=self.config.render_hz,
            clock=clock,
        )

        self.memory = Memory(rom)
        self.framebuffer = Framebuffer()
        self.keys = KeyState()
        self.buzzer = buzzer or Buzzer()
        self.cpu = CPU(self.memory, self.framebuffer, self.keys, self.buzzer, rng)

        # Key events posted from other threads, applied before each tick
        self._inbox: "queue.SimpleQueue[KeyEvent]" = queue.SimpleQueue()

        self._is_running = False
        self._total_ticks = 0

        logger.debug(f"Initialized emulator with {self.config}")

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        config: Optional[EmulatorConfig] = None,
        **kwargs,
    ) -> "Emulator":
        """
        Create an emulator from a ROM file.

        Args:
            path: Path to the raw ROM image
            config: EmulatorConfig
            **kwargs: Passed through to the constructor

        Raises:
            FileNotFoundError: If the ROM file doesn't exist
            RomSizeError: If the ROM does not fit in program space
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")
        rom = path.read_bytes()
        logger.debug(f"Read {len(rom)} bytes from {path}")
        return cls(rom, config, **kwargs)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def pixel_color(self) -> DisplayColor:
        return self._pixel_color

    @property
    def background_color(self) -> DisplayColor:
        return self._pixel_color.background

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def total_ticks(self) -> int:
        """Number of ticks dispatched by run()."""
        return self._total_ticks

    # =========================================================================
    # Keypad Input
    # =========================================================================

    def post_key_event(self, event: KeyEvent) -> None:
        """
        Queue a key event from any thread.

        Queued events become visible to the next dispatched tick.
        """
        self._inbox.put(event)

    def apply_key_event(self, event: KeyEvent) -> None:
        """Apply a key event immediately (VM thread only)."""
        if event.kind is KeyEventType.PRESS:
            self.cpu.press_key(event.key)
        else:
            self.cpu.release_key(event.key)

    def press_key(self, key: int) -> None:
        self.apply_key_event(KeyEvent.press(key))

    def release_key(self, key: int) -> None:
        self.apply_key_event(KeyEvent.release(key))

    def release_all_keys(self) -> None:
        """
        Release every held key (VM thread only).

        Queued events are applied first. A pending Fx0A wait is kept.
        """
        self.drain_key_events()
        self.keys.clear()

    def drain_key_events(self) -> int:
        """
        Apply all queued key events in arrival order.

        Returns:
            Number of events applied
        """
        applied = 0
        while True:
            try:
                event = self._inbox.get_nowait()
            except queue.Empty:
                return applied
            self.apply_key_event(event)
            applied += 1

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> Optional[Instruction]:
        """
        Execute a single instruction (no-op while waiting for a key).

        Returns:
            The executed Instruction, or None if suspended
        """
        self.drain_key_events()
        return self.cpu.step()

    def tick_timers(self) -> None:
        """Advance the delay and sound timers by one 60 Hz tick."""
        self.drain_key_events()
        self.cpu.timer_tick()

    def run_cycles(self, count: int) -> int:
        """
        Execute up to `count` instructions without the scheduler.

        Stops early if the CPU becomes suspended by Fx0A.

        Returns:
            Number of instructions executed
        """
        executed = 0
        for _ in range(count):
            if self.step() is None:
                break
            executed += 1
        return executed

    def dispatch(self, tick: Tick, on_render: Optional[RenderCallback] = None) -> None:
        """
        Apply one scheduler tick to the VM.

        Args:
            tick: The tick to apply
            on_render: Receives a framebuffer snapshot on RENDER ticks
        """
        self.drain_key_events()
        match tick.kind:
            case TickKind.CLOCK:
                self.cpu.step()
            case TickKind.TIMER:
                self.cpu.timer_tick()
            case TickKind.RENDER:
                if on_render is not None:
                    on_render(self.framebuffer.snapshot())

    def run(
        self,
        on_render: Optional[RenderCallback] = None,
        should_stop: Optional[Callable[[], bool]] = None,
        max_ticks: Optional[int] = None,
    ) -> int:
        """
        Run the VM from the scheduler until stopped.

        Execution continues until:
        - should_stop() returns True (checked before every tick)
        - max_ticks ticks have been dispatched
        - an exception propagates (unsupported opcode, bad access)

        Args:
            on_render: Receives a framebuffer snapshot on every render tick
            should_stop: Polled before each tick
            max_ticks: Maximum number of ticks to dispatch

        Returns:
            Number of ticks dispatched
        """
        self._is_running = True
        dispatched = 0
        try:
            for tick in self.scheduler.ticks(max_ticks):
                if should_stop is not None and should_stop():
                    break
                self.dispatch(tick, on_render)
                dispatched += 1
        finally:
            self._is_running = False
            self._total_ticks += dispatched
        return dispatched
