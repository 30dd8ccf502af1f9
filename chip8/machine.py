import logging as lg
import time
from pathlib import Path

from chip8.computer import C8Computer
from chip8.constants import MEMORY_SIZE, MEMORY_ETI660_SIZE, PROGRAM_START, PROGRAM_ETI660_START, STEPS_PER_FRAME
from chip8.errors import LoadError, MemoryFault, ResetError
from chip8.keypad import Keypad
from chip8.memory import MemoryBank
from chip8.screen import C8Screen


class Chip8:
    '''
    Ties a loaded program to a fresh MemoryBank and C8Computer.  The screen, keypad and
    beeper outlive individual programs and are shared with whatever frontend is drawing.
    '''

    def __init__(self, screen=None, keypad=None, beep=None, hires_quirk=True,
                 steps_per_frame=STEPS_PER_FRAME, clock=time.perf_counter):
        self.screen = screen if screen is not None else C8Screen()
        self.keypad = keypad if keypad is not None else Keypad()
        self.beep = beep
        self.hires_quirk = hires_quirk
        self.steps_per_frame = steps_per_frame
        self.clock = clock
        self.memory = None
        self.computer = None
        self.debug_mode = False

    def load_program(self, rom_file, eti660=False):
        lg.info('Loading program "%s" (%s)', rom_file, "ETI 660" if eti660 else "Normal")
        self.computer = None

        try:
            program = Path(rom_file).read_bytes()
        except OSError as e:
            raise LoadError("Failed to load program - could not read {}: {}".format(rom_file, e)) from e

        self.load_bytes(program, eti660)

    def load_bytes(self, program, eti660=False):
        self.computer = None
        memory = MemoryBank(MEMORY_ETI660_SIZE if eti660 else MEMORY_SIZE)
        start = PROGRAM_ETI660_START if eti660 else PROGRAM_START
        try:
            size = memory.load(start, program)
        except MemoryFault as e:
            raise LoadError("Failed to load program - {} bytes do not fit in memory at 0x{:03X}".format(
                len(program), start)) from e

        lg.info("Program load successful! (Size: %dB)", size)
        self.memory = memory
        self.computer = C8Computer(memory, self.screen, self.keypad, self.beep, eti660=eti660,
                                   hires_quirk=self.hires_quirk, steps_per_frame=self.steps_per_frame,
                                   clock=self.clock)

    def is_loaded(self):
        return self.computer is not None

    def run_frame(self):
        # Nothing loaded: nothing to run, the frontend shows a blank screen
        if self.computer is None:
            return
        self.computer.run_frame()

    def soft_reset(self):
        lg.info("Performing soft reset...")
        if self.computer is None:
            raise ResetError("Cannot soft reset - no program loaded")
        self.computer.reset()

    def set_beep(self, beep):
        self.beep = beep
        if self.computer is not None:
            self.computer.set_beep(beep)

    def set_debug_mode(self, val):
        self.debug_mode = val

    def is_in_debug_mode(self):
        return self.debug_mode
