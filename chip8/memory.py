from array import array

from chip8.errors import MemoryFault


class MemoryBank:
    '''
    Fixed-size byte-addressable RAM.  The standard CHIP-8 has 4096 bytes; the ETI 660
    variant has 2048.  Addresses 0x000-0x1FF are reserved for the interpreter, and we
    keep the hexadecimal font sprites at the bottom of that region.

    Every access is bounds-checked: an address at or past the end of RAM raises
    MemoryFault instead of wrapping.
    '''

    def __init__(self, capacity):
        self._capacity = capacity
        self.RAM = array('B', [0 for i in range(capacity)])

    def reset(self):
        for i in range(self._capacity):
            self.RAM[i] = 0

    def capacity(self):
        return self._capacity

    def read(self, address):
        if not 0 <= address < self._capacity:
            raise MemoryFault(address, self._capacity)
        return self.RAM[address]

    def write(self, address, value):
        if not 0 <= address < self._capacity:
            raise MemoryFault(address, self._capacity)
        self.RAM[address] = value & 0xFF

    def load(self, start, data):
        # Writes byte by byte so a program that is too large faults at the first byte that
        # does not fit, same as it would on the hardware loader.
        address = start
        for value in data:
            self.write(address, value)
            address += 1
        return address - start

    def __len__(self):
        return self._capacity
