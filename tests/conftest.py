import pytest

from chip8.computer import C8Computer
from chip8.constants import MEMORY_SIZE, PROGRAM_START
from chip8.keypad import Keypad
from chip8.memory import MemoryBank
from chip8.screen import C8Screen


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingBeeper:
    def __init__(self):
        self.calls = []

    def set_beeping(self, val):
        self.calls.append(val)


def load_words(memory, start, *words):
    for i, word in enumerate(words):
        memory.write(start + i * 2, word >> 8)
        memory.write(start + i * 2 + 1, word & 0xFF)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def beeper():
    return RecordingBeeper()


@pytest.fixture
def keypad():
    return Keypad()


@pytest.fixture
def memory():
    return MemoryBank(MEMORY_SIZE)


@pytest.fixture
def screen():
    return C8Screen()


@pytest.fixture
def computer(memory, screen, keypad, beeper, clock):
    return C8Computer(memory, screen, keypad, beeper, clock=clock, seed=1234)


@pytest.fixture
def run_program(computer, memory):
    '''Loads the given opcodes at the program start and executes one step per opcode.'''

    def run(*words, steps=None):
        load_words(memory, PROGRAM_START, *words)
        for i in range(len(words) if steps is None else steps):
            computer.step()
        return computer

    return run
