"""
Emulator Integration Tests
==========================

Tests for the Emulator orchestrator: construction from config and files,
the key event inbox, and scheduled runs on virtual time.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import random
import threading

import pytest
from chip8vm import Emulator, EmulatorConfig, KeyEvent
from chip8vm.emulator.models import COLOR_AMBER
from chip8vm.emulator.scheduler import ManualClock, Tick, TickKind
from chip8vm.errors import ConfigurationError, RomSizeError, UnsupportedInstructionError


def program(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


def make_emulator(*words: int, **config) -> Emulator:
    """Emulator on virtual time with a seeded random source."""
    return Emulator(
        program(*words),
        EmulatorConfig(**config),
        rng=random.Random(0),
        clock=ManualClock(),
    )


# =============================================================================
# Construction Tests
# =============================================================================

class TestConstruction:
    """Test configuration and loading."""

    def test_defaults(self):
        emu = make_emulator()
        assert emu.config.clock_hz == 500
        assert emu.config.color == "white"
        assert emu.cpu.pc == 0x200

    def test_colors(self):
        emu = make_emulator(color="amber")
        assert emu.pixel_color is COLOR_AMBER
        assert emu.background_color == COLOR_AMBER.background

    def test_invalid_color(self):
        with pytest.raises(ConfigurationError):
            make_emulator(color="magenta")

    def test_invalid_clock(self):
        with pytest.raises(ConfigurationError):
            make_emulator(clock_hz=501)

    def test_rom_too_large(self):
        with pytest.raises(RomSizeError):
            Emulator(bytes(0xE01))

    def test_from_file(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x6A3C))
        emu = Emulator.from_file(rom, clock=ManualClock())
        emu.step()
        assert emu.cpu.v[0xA] == 0x3C

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Emulator.from_file(tmp_path / "missing.ch8")


# =============================================================================
# Key Inbox Tests
# =============================================================================

class TestKeyInbox:
    """Test key events posted from other threads."""

    def test_posted_press_resolves_wait(self):
        """A press posted while suspended reaches the register on the next step."""
        emu = make_emulator(0xF30A, 0x6001)
        emu.step()
        assert emu.cpu.is_waiting

        poster = threading.Thread(target=emu.post_key_event, args=(KeyEvent.press(0x7),))
        poster.start()
        poster.join()

        # Not applied until the VM thread drains the inbox
        assert emu.cpu.v[3] == 0

        instr = emu.step()
        assert emu.cpu.v[3] == 0x7
        assert instr.mnemonic == "LD V0, 0x01"

    def test_events_applied_in_order(self):
        emu = make_emulator()
        emu.post_key_event(KeyEvent.press(0x1))
        emu.post_key_event(KeyEvent.release(0x1))
        emu.post_key_event(KeyEvent.press(0x2))
        assert emu.drain_key_events() == 3
        assert emu.keys.pressed_keys == frozenset({0x2})

    def test_direct_press_and_release(self):
        emu = make_emulator()
        emu.press_key(0xF)
        assert emu.keys.is_pressed(0xF)
        emu.release_key(0xF)
        assert not emu.keys.is_pressed(0xF)

    def test_release_all_keys(self):
        """Queued presses are applied, then every key is released."""
        emu = make_emulator(0xF20A)
        emu.step()
        emu.press_key(0x1)
        emu.post_key_event(KeyEvent.press(0x9))
        emu.release_all_keys()
        assert emu.keys.pressed_keys == frozenset()
        assert emu.cpu.v[2] == 0x1

    def test_timer_tick_drains_inbox(self):
        emu = make_emulator()
        emu.post_key_event(KeyEvent.press(0x4))
        emu.tick_timers()
        assert emu.keys.is_pressed(0x4)


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:
    """Test stepping and scheduled runs."""

    def test_run_cycles(self):
        emu = make_emulator(0x6001, 0x6102, 0x6203)
        assert emu.run_cycles(3) == 3
        assert bytes(emu.cpu.v[0:3]) == bytes([1, 2, 3])

    def test_run_cycles_stops_on_wait(self):
        emu = make_emulator(0xF00A, 0x6001)
        assert emu.run_cycles(5) == 1
        assert emu.cpu.is_waiting

    def test_dispatch(self):
        emu = make_emulator(0x6A3C)
        frames = []
        emu.dispatch(Tick(0.0, TickKind.CLOCK))
        emu.dispatch(Tick(0.0, TickKind.RENDER), frames.append)
        assert emu.cpu.v[0xA] == 0x3C
        assert len(frames) == 1

    def test_render_dispatch_only_reads(self):
        """Render ticks hand over equal snapshots of an unchanged grid."""
        emu = make_emulator(0x6000, 0xF029, 0xD005)
        emu.run_cycles(3)
        frames = []
        emu.dispatch(Tick(0.0, TickKind.RENDER), frames.append)
        emu.dispatch(Tick(0.0, TickKind.RENDER), frames.append)
        assert frames[0] == frames[1]
        assert emu.framebuffer.lit_pixels() == sum(map(sum, frames[0]))

    def test_run_draws_and_renders(self):
        """A drawing loop at 60 Hz shows the glyph by the third render."""
        # LD V0, 0; LD F, V0; DRW V0, V0, 5; JP self
        emu = make_emulator(0x6000, 0xF029, 0xD005, 0x1206, clock_hz=60)
        frames = []
        ticks = emu.run(on_render=frames.append, max_ticks=9)

        assert ticks == 9
        assert emu.total_ticks == 9
        # 3 rounds of TIMER, CLOCK, RENDER
        assert len(frames) == 3
        assert sum(frames[-1][0]) == 4  # top row of glyph 0
        assert not emu.is_running

    def test_run_timers_at_60hz(self):
        """At a 60 Hz clock every third tick is a timer tick."""
        emu = make_emulator(0x1200, clock_hz=60)  # JP self
        emu.cpu.delay_timer = 100
        emu.run(max_ticks=3 * 60)
        assert emu.cpu.delay_timer == 40

    def test_should_stop(self):
        emu = make_emulator(0x1200)
        calls = []

        def stop():
            calls.append(1)
            return len(calls) > 5

        assert emu.run(should_stop=stop) == 5

    def test_run_propagates_fatal_errors(self):
        emu = make_emulator(0xFFFF)
        with pytest.raises(UnsupportedInstructionError):
            emu.run(max_ticks=100)
        assert not emu.is_running

    def test_run_is_deterministic(self):
        """Same seed and virtual clock produce identical machine state."""
        words = (0xC0FF, 0xC1FF, 0x8014, 0x1200)
        a = make_emulator(*words)
        b = make_emulator(*words)
        a.run(max_ticks=50)
        b.run(max_ticks=50)
        assert a.cpu.v == b.cpu.v
        assert a.cpu.pc == b.cpu.pc
