from chip8.computer import C8Computer, MachineState, RegisterFile
from chip8.errors import Chip8Error, LoadError, ResetError, ExecutionFault, MemoryFault, StackFault, DecodeFault
from chip8.keypad import Keypad
from chip8.machine import Chip8
from chip8.memory import MemoryBank
from chip8.rand import RandomSource
from chip8.screen import C8Screen
from chip8.timers import TimerSubsystem
