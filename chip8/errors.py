class Chip8Error(Exception):
    pass


class LoadError(Chip8Error):
    pass


class ResetError(Chip8Error):
    pass


class ExecutionFault(Chip8Error):
    '''
    Raised when an instruction cannot be executed.  step() fills in the machine
    state at the time of the fault so the message is enough to diagnose it.
    '''

    def __init__(self, message):
        super().__init__(message)
        self.message = message
        self.pc = None
        self.sp = None
        self.i = None
        self.opcode = None

    def add_context(self, pc, sp, i, opcode):
        self.pc = pc
        self.sp = sp
        self.i = i
        self.opcode = opcode

    def __str__(self):
        if self.pc is None:
            return self.message
        # The opcode is unknown when the fetch itself faulted
        opcode = "----" if self.opcode is None else "{:04X}".format(self.opcode)
        return "{} (opcode: 0x{}, PC: 0x{:03X}, SP: 0x{:X}, I: 0x{:03X})".format(
            self.message, opcode, self.pc, self.sp, self.i)


class MemoryFault(ExecutionFault):
    def __init__(self, address, capacity):
        super().__init__("Memory access out of bounds: 0x{:X} (capacity 0x{:X})".format(address, capacity))
        self.address = address
        self.capacity = capacity


class StackFault(ExecutionFault):
    pass


class DecodeFault(ExecutionFault):
    def __init__(self, opcode):
        super().__init__("Unknown opcode: 0x{:04X}".format(opcode))
