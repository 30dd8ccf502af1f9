import enum
import logging as lg
import time
from array import array

from chip8.constants import (
    PROGRAM_START, PROGRAM_ETI660_START, PROGRAM_HIRES_START, HIRES_JUMP_TARGET,
    DISPLAY_WIDTH, DISPLAY_HEIGHT, HIRES_DISPLAY_WIDTH, HIRES_DISPLAY_HEIGHT,
    REGISTER_COUNT, FLAG_REGISTER, STACK_DEPTH, STEPS_PER_FRAME,
    FONT_SPRITES, FONT_SPRITES_START, FONT_SPRITE_HEIGHT
)
from chip8.errors import ExecutionFault, StackFault, DecodeFault, MemoryFault
from chip8.keypad import Keypad
from chip8.rand import RandomSource
from chip8.timers import TimerSubsystem


class MachineState(enum.Enum):
    RUNNING = "running"
    WAITING_FOR_INPUT = "waiting for input"
    FAULTED = "faulted"


class RegisterFile:

    def __init__(self):
        # The 16 registers are named V0..VF; VF doubles as the flags register
        self.V = array('B', [0 for i in range(REGISTER_COUNT)])
        # Special-purpose 16-bit register, generally holds an address
        self.I = 0
        # Program Counter
        self.PC = PROGRAM_START
        # Stack pointer.  CALL pre-increments, so slots 1..16 hold return addresses and
        # slot 0 is only ever read by a RET on an empty stack.
        self.SP = 0
        self.stack = array('H', [0 for i in range(STACK_DEPTH + 1)])
        self.delay_register = 0
        self.sound_register = 0

    def reset(self, pc):
        self.PC = pc
        self.I = 0
        self.SP = 0
        self.delay_register = 0
        self.sound_register = 0
        for i in range(REGISTER_COUNT):
            self.V[i] = 0
        for i in range(STACK_DEPTH + 1):
            self.stack[i] = 0


class C8Computer:
    '''
    The CHIP-8 CPU.  Owns the register file and executes instructions against a
    MemoryBank and a C8Screen it is handed.  Keys, the sound sink and the clock are
    injected so the machine can run headless.

    Every handler returns True when the PC should move on to the next instruction and
    False when it has already set the PC itself.
    Faults are raised as ExecutionFault subclasses.
    '''

    def __init__(self, memory, screen, keypad=None, beep=None, eti660=False, hires_quirk=True,
                 steps_per_frame=STEPS_PER_FRAME, clock=time.perf_counter, seed=None):
        self.memory = memory
        self.screen = screen
        self.keypad = keypad if keypad is not None else Keypad()
        self.beep = beep
        self.eti660 = eti660
        self.hires_quirk = hires_quirk
        self.steps_per_frame = steps_per_frame
        self.seed = seed

        self.registers = RegisterFile()
        self.random = RandomSource(seed)
        self.timers = TimerSubsystem(self.registers, beep, clock)
        self.font_sprites_addr = FONT_SPRITES_START

        self.hires = False
        self.waiting_for_input = False
        self.last_opcode = 0
        self.last_fault = None

        # Using a list of functions to speed the lookup, vs. doing a big nested
        # if/else.  There is one instruction for each of the high-order nibbles
        # 1 through 7 and 9 through D.  The others (0, 8, E, F) have multiple.
        self.operation_list = [
            self._0_opcodes, self._1nnn, self._2nnn, self._3xkk, self._4xkk, self._5xy0,
            self._6xkk, self._7xkk, self._8_opcodes, self._9xy0, self._Annn, self._Bnnn,
            self._Cxkk, self._Dxyn, self._E_opcodes, self._F_opcodes
        ]

        # opcodes beginning with 8 can be determined based on the least-significant
        # nibble (0..7 and E)
        self._8_operations = [
            self._8xy0, self._8xy1, self._8xy2, self._8xy3, self._8xy4, self._8xy5,
            self._8xy6, self._8xy7, None, None, None, None, None, None, self._8xyE, None
        ]

        # opcodes beginning with F can be determined based on the least-significant
        # byte.  Since this is sparse, use a dictionary.
        self._F_operations = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65
        }

        self.reset()

    # -- Properties -- #

    @property
    def V(self):
        return self.registers.V

    @property
    def PC(self):
        return self.registers.PC

    @property
    def SP(self):
        return self.registers.SP

    @property
    def I(self):
        return self.registers.I

    @property
    def state(self):
        if self.last_fault is not None:
            return MachineState.FAULTED
        if self.waiting_for_input:
            return MachineState.WAITING_FOR_INPUT
        return MachineState.RUNNING

    def program_start(self):
        return PROGRAM_ETI660_START if self.eti660 else PROGRAM_START

    # -- Lifecycle -- #

    def reset(self):
        self.registers.reset(self.program_start())
        self.load_font_sprites()
        self.random.reseed(self.seed)
        self.timers.reset()

        self.screen.resize(DISPLAY_WIDTH, DISPLAY_HEIGHT)
        self.hires = False
        if self.beep is not None:
            # Make sure a beep from before the reset doesn't keep going
            self.beep.set_beeping(False)

        self.waiting_for_input = False
        self.last_opcode = 0
        self.last_fault = None

    def set_beep(self, beep):
        self.beep = beep
        self.timers.beep = beep

    def load_font_sprites(self):
        '''
        Video in the CHIP-8 is sprite-driven.  Each sprite is 8 pixels wide, and from 1-15 pixels high.
        A font representing 0..9 + A..F is required for proper operation.  Example for the character 2:

                   ****....
                   ...*....
                   ****....
                   *.......
                   ****....

        The font has to live in the interpreter's reserved RAM below 0x200.  We put it at 0x000.
        '''
        for i, value in enumerate(FONT_SPRITES):
            self.memory.write(self.font_sprites_addr + i, value)

    # -- Execution -- #

    def fetch(self):
        pc = self.registers.PC
        return self.memory.read(pc) << 8 | self.memory.read(pc + 1)

    def execute(self, opcode):
        '''
        Instructions have one of 6 patterns:
        Low byte fixed (the x nibble is ignored):
            00E0, 00EE
        Operation + nnn (address)
            0nnn, 1nnn, 2nnn, Annn, Bnnn
        Operation + Vx + kk (byte)
            3xkk, 4xkk, 6xkk, 7xkk, Cxkk
        Operation + Vx + Vy + nibble-type
            5xy0, 8xy0, 8xy1, 8xy2, 8xy3,
            8xy4, 8xy5, 8xy6, 8xy7, 8xyE, 9xy0
        Operation + Vx + Vy + n (nibble)
            Dxyn
        Operation + Vx + byte-type
            Ex9E, ExA1, Fx07, Fx0A, Fx15,
            Fx18, Fx1E, Fx29, Fx33, Fx55,
            Fx65

        To minimize redundant code, calculate all the possible ways
        to parse the opcode and then later use only the ones that are needed
        '''
        operation = opcode >> 12
        vx = opcode >> 8 & 0xF
        vy = opcode >> 4 & 0xF
        n = opcode & 0xF
        nnn = opcode & 0xFFF
        kk = opcode & 0xFF
        increment_pc = self.operation_list[operation](opcode, vx, vy, n, kk, nnn)
        if increment_pc:
            self.next_instruction()

    def step(self):
        opcode = None
        try:
            opcode = self.fetch()
            self.last_opcode = opcode
            self.execute(opcode)
            if lg.getLogger().isEnabledFor(lg.DEBUG):
                lg.debug("Executed 0x%04X\n%s", opcode, self.debug_text())
        except ExecutionFault as fault:
            fault.add_context(self.registers.PC, self.registers.SP, self.registers.I, opcode)
            self.last_fault = fault
            lg.error("Execution fault: %s", fault)
            raise

        # Timers are frozen while blocked on Fx0A
        if not self.waiting_for_input:
            self.timers.update()

    def run_frame(self):
        for i in range(self.steps_per_frame):
            self.step()

    # -- Helpers -- #

    def next_instruction(self):
        self.registers.PC = (self.registers.PC + 2) & 0xFFFF

    def skip_if(self, condition):
        # The handler's True return adds the other 2
        if condition:
            self.next_instruction()
        return True

    def is_hires_mode(self):
        return self.hires

    def is_eti660_mode(self):
        return self.eti660

    def is_waiting_for_input(self):
        return self.waiting_for_input

    # -- Operations -- #

    def _0_opcodes(self, opcode, vx, vy, n, kk, nnn):
        # Only the low byte picks the instruction, so 0x0nE0 is CLS and 0x0nEE is RET for any n
        if kk == 0xE0:
            # 00E0 - CLS
            # clear the screen
            self.screen.clear()
            return True
        elif kk == 0xEE:
            return self._00EE()
        else:
            # 0nnn - SYS addr
            # Used to call machine code routines on the original hardware.  Ignored.
            lg.info("Ignoring SYS instruction: 0x%04X (PC: 0x%03X)", opcode, self.registers.PC)
            return True

    def _00EE(self):
        # 00EE - RET
        # Return from a subroutine.  The stack holds the address of the CALL itself, so
        # resume 2 past it.  The check is made before the decrement, so a RET on an empty
        # stack reads slot 0 and wraps SP to 0xFF; only the next RET faults.
        r = self.registers
        if r.SP > STACK_DEPTH:
            raise StackFault("Invalid SP for RET instruction")
        r.PC = (r.stack[r.SP] + 2) & 0xFFFF
        r.SP = (r.SP - 1) & 0xFF
        return False

    def _1nnn(self, opcode, vx, vy, n, kk, nnn):
        # 1nnn - JP addr
        # Jump to location nnn.  Hi-res programs start with JP 0x260 at 0x200; they switch the
        # display to 64x64 and really begin at 0x2C0.
        if self.hires_quirk and self.registers.PC == PROGRAM_START and nnn == HIRES_JUMP_TARGET:
            lg.info("Program is initializing hi-res mode")
            self.hires = True
            self.screen.resize(HIRES_DISPLAY_WIDTH, HIRES_DISPLAY_HEIGHT)
            self.registers.PC = PROGRAM_HIRES_START
            return False

        self.registers.PC = nnn
        return False

    def _2nnn(self, opcode, vx, vy, n, kk, nnn):
        # 2nnn - CALL addr
        # Call subroutine at nnn
        r = self.registers
        if r.SP >= STACK_DEPTH:
            raise StackFault("No room on the stack for CALL 0x{:03X}".format(nnn))
        r.SP += 1
        r.stack[r.SP] = r.PC
        r.PC = nnn
        return False

    def _3xkk(self, opcode, vx, vy, n, kk, nnn):
        # 3xkk - SE Vx, byte
        # Skip next instruction if Vx == kk
        return self.skip_if(self.V[vx] == kk)

    def _4xkk(self, opcode, vx, vy, n, kk, nnn):
        # 4xkk - SNE Vx, byte
        # Skip next instruction if Vx != kk
        return self.skip_if(self.V[vx] != kk)

    def _5xy0(self, opcode, vx, vy, n, kk, nnn):
        # 5xy0 - SE Vx, Vy
        # Skip next instruction if Vx == Vy.  The low nibble is not checked.
        return self.skip_if(self.V[vx] == self.V[vy])

    def _6xkk(self, opcode, vx, vy, n, kk, nnn):
        # 6xkk - LD Vx, byte
        # Set Vx = kk
        self.V[vx] = kk
        return True

    def _7xkk(self, opcode, vx, vy, n, kk, nnn):
        # 7xkk - ADD Vx, byte
        # Add value in kk to vx, stores result in vx, does NOT set overflow flag
        self.V[vx] = (self.V[vx] + kk) & 0xFF
        return True

    def _8_opcodes(self, opcode, vx, vy, n, kk, nnn):
        operation = self._8_operations[n]
        if operation is None:
            raise DecodeFault(opcode)
        return operation(vx, vy)

    def _8xy0(self, vx, vy):
        # 8xy0 - LD Vx, Vy
        # Set Vx = Vy
        self.V[vx] = self.V[vy]
        return True

    def _8xy1(self, vx, vy):
        # 8xy1 - OR Vx, Vy
        # Set Vx = Vx OR Vy.  VF is left alone.
        self.V[vx] = self.V[vx] | self.V[vy]
        return True

    def _8xy2(self, vx, vy):
        # 8xy2 - AND Vx, Vy
        # Set Vx = Vx AND Vy
        self.V[vx] = self.V[vx] & self.V[vy]
        return True

    def _8xy3(self, vx, vy):
        # 8xy3 - XOR Vx, Vy
        # Set Vx = Vx XOR Vy
        self.V[vx] = self.V[vx] ^ self.V[vy]
        return True

    def _8xy4(self, vx, vy):
        # 8xy4 - ADD Vx, Vy
        # Set Vx = Vx + Vy, set VF = carry.  The flag is written first, same as for SUB.
        if self.V[vx] + self.V[vy] > 255:
            self.V[FLAG_REGISTER] = 1
        else:
            self.V[FLAG_REGISTER] = 0
        self.V[vx] = (self.V[vx] + self.V[vy]) & 0xFF
        return True

    def _8xy5(self, vx, vy):
        # 8xy5 - SUB Vx, Vy
        # Set Vx = Vx - Vy.  Set VF = NOT borrow (VF = 1 if Vx > Vy)
        if self.V[vx] > self.V[vy]:
            self.V[FLAG_REGISTER] = 1
        else:
            self.V[FLAG_REGISTER] = 0
        self.V[vx] = (self.V[vx] - self.V[vy]) & 0xFF
        return True

    def _8xy6(self, vx, vy):
        # 8xy6 - SHR Vx
        # VF is set to the least significant bit of Vx, then Vx is divided by 2
        self.V[FLAG_REGISTER] = self.V[vx] & 0x1
        self.V[vx] = self.V[vx] >> 1
        return True

    def _8xy7(self, vx, vy):
        # 8xy7 - SUBN Vx, Vy
        # Set Vx = Vy - Vx.  Set VF = NOT borrow (VF = 1 if Vy > Vx)
        if self.V[vy] > self.V[vx]:
            self.V[FLAG_REGISTER] = 1
        else:
            self.V[FLAG_REGISTER] = 0
        self.V[vx] = (self.V[vy] - self.V[vx]) & 0xFF
        return True

    def _8xyE(self, vx, vy):
        # 8xyE - SHL Vx
        # VF is set to the most significant bit of Vx, then Vx is multiplied by 2
        self.V[FLAG_REGISTER] = (self.V[vx] & 0x80) >> 7
        self.V[vx] = (self.V[vx] << 1) & 0xFF
        return True

    def _9xy0(self, opcode, vx, vy, n, kk, nnn):
        # 9xy0 - SNE Vx, Vy
        # Skip next instruction if Vx != Vy
        return self.skip_if(self.V[vx] != self.V[vy])

    def _Annn(self, opcode, vx, vy, n, kk, nnn):
        # Annn - LD I, addr
        # The value of register I is set to nnn
        self.registers.I = nnn
        return True

    def _Bnnn(self, opcode, vx, vy, n, kk, nnn):
        # Bnnn - JP V0, addr
        # The program counter is set to nnn plus the value of V0
        self.registers.PC = nnn + self.V[0]
        return False

    def _Cxkk(self, opcode, vx, vy, n, kk, nnn):
        # Cxkk - RND Vx, byte
        # Set Vx = random byte AND kk
        self.V[vx] = self.random.next_byte() & kk
        return True

    def _Dxyn(self, opcode, vx, vy, n, kk, nnn):
        # Dxyn - DRW Vx, Vy, nibble
        # Draw the n-byte sprite at I to (Vx, Vy), XORing it onto the screen.  VF = 1 if any
        # lit pixel gets turned off.  Pixels past an edge wrap to the other side.
        x = self.V[vx]
        y = self.V[vy]
        self.V[FLAG_REGISTER] = 0
        for row in range(n):
            line = self.memory.read((self.registers.I + row) & 0xFFFF)
            for col in range(8):
                if not (line << col) & 0x80:
                    # 0 means do nothing, so only treat the 1 case
                    continue
                if self.screen.pixel_state(x + col, y + row):
                    self.V[FLAG_REGISTER] = 1
                self.screen.plot(x + col, y + row)
        return True

    def _E_opcodes(self, opcode, vx, vy, n, kk, nnn):
        if kk == 0x9E:
            # Ex9E - SKP Vx
            # Skip next instruction if key with value of Vx is pressed
            return self.skip_if(self.keypad.is_key_down(self.V[vx]))
        elif kk == 0xA1:
            # ExA1 - SKNP Vx
            # Skip next instruction if key with value of Vx is NOT pressed
            return self.skip_if(not self.keypad.is_key_down(self.V[vx]))
        else:
            raise DecodeFault(opcode)

    def _Fx07(self, vx):
        # Fx07 - LD Vx, DT
        # The value of the Delay Timer is placed into Vx.
        self.V[vx] = self.registers.delay_register
        return True

    def _Fx0A(self, vx):
        # Fx0A - LD Vx, K
        # Wait for a key press, store the value of the key in Vx.  While no key is down the
        # PC stays put, so this instruction runs again on the next step.
        key = self.keypad.current_pressed_key()
        if key is None:
            self.waiting_for_input = True
            return False
        self.V[vx] = key
        self.waiting_for_input = False
        return True

    def _Fx15(self, vx):
        # Fx15 - LD DT, Vx
        # Set Delay Timer = Vx
        self.registers.delay_register = self.V[vx]
        return True

    def _Fx18(self, vx):
        # Fx18 - LD ST, Vx
        # Set Sound Timer = Vx.  The beep itself starts on the next timer tick.
        self.registers.sound_register = self.V[vx]
        return True

    def _Fx1E(self, vx):
        # Fx1E - ADD I, Vx
        # Set I = I + Vx - do not set the overflow flag
        self.registers.I = (self.registers.I + self.V[vx]) & 0xFFFF
        return True

    def _Fx29(self, vx):
        # Fx29 - LD F, Vx
        # Set I = location of sprite for digit Vx ("F" = Font)
        self.registers.I = self.font_sprites_addr + (self.V[vx] * FONT_SPRITE_HEIGHT)
        return True

    def _Fx33(self, vx):
        # Fx33 - LD B, Vx
        # Store binary coded decimal value of Vx in memory locations I, I+1, I+2
        val = self.V[vx]
        i = self.registers.I
        self.memory.write(i, val // 100)
        self.memory.write((i + 1) & 0xFFFF, (val % 100) // 10)
        self.memory.write((i + 2) & 0xFFFF, val % 10)
        return True

    def _Fx55(self, vx):
        # Fx55 - LD [I], Vx
        # Store registers V0 through Vx in memory starting at location I.  I is not changed.
        for i in range(vx + 1):
            self.memory.write((self.registers.I + i) & 0xFFFF, self.V[i])
        return True

    def _Fx65(self, vx):
        # Fx65 - LD Vx, [I]
        # Read values from memory starting at location I into registers V0 through Vx
        for i in range(vx + 1):
            self.V[i] = self.memory.read((self.registers.I + i) & 0xFFFF)
        return True

    def _F_opcodes(self, opcode, vx, vy, n, kk, nnn):
        if kk in self._F_operations:
            return self._F_operations[kk](vx)
        else:
            raise DecodeFault(opcode)

    # -- Debugging -- #

    def debug_text(self):
        r = self.registers
        lines = [
            "Op: 0x{:04X}, PC: 0x{:03X}{}".format(
                self.last_opcode, r.PC, " - WAITING FOR INPUT" if self.waiting_for_input else ""),
            "SP: 0x{:X}, I: 0x{:03X}".format(r.SP, r.I),
            "DT: 0x{:X}, ST: 0x{:X}".format(r.delay_register, r.sound_register),
            "V: " + ", ".join("0x{:X}".format(v) for v in r.V)
        ]
        return "\n".join(lines)

    def debug_dump(self, filename="debug.txt"):
        r = self.registers
        with open(filename, "w") as outfile:
            outfile.write("PC: 0x{:03X}\n".format(r.PC))
            try:
                outfile.write("Next instr.: 0x{:04X}\n".format(self.fetch()))
            except MemoryFault:
                outfile.write("Next instr.: out of bounds\n")
            outfile.write("I: 0x{:03X}\n".format(r.I))
            for i in range(REGISTER_COUNT):
                outfile.write("V{:X}: 0x{:02X}".format(i, r.V[i]))
                if i % 4 == 3:
                    outfile.write('\n')
                else:
                    outfile.write('\t')
            outfile.write("delay register: 0x{:X}\n".format(r.delay_register))
            outfile.write("sound register: 0x{:X}\n".format(r.sound_register))
            outfile.write("SP: 0x{:X}\n".format(r.SP))
            depth = min(r.SP, STACK_DEPTH)
            outfile.write("stack: [{}]\n".format(
                ", ".join("0x{:03X}".format(r.stack[i]) for i in range(1, depth + 1))))
            if self.last_fault is not None:
                outfile.write("fault: {}\n".format(self.last_fault))

            outfile.write("\n\nRAM:\n")
            capacity = self.memory.capacity()
            for i in range(capacity):
                if i % 32 == 0:
                    outfile.write("0x{:03X} - 0x{:03X}:  ".format(i, i + 31))
                outfile.write("{:02X}".format(self.memory.read(i)))
                if i % 32 == 31:
                    outfile.write("\n")
