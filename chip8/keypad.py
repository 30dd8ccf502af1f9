from typing import Optional, Protocol


class KeyInput(Protocol):
    def is_key_down(self, code: int) -> bool:
        ...

    def current_pressed_key(self) -> Optional[int]:
        ...


class Keypad:
    '''
    The CHIP-8 hex keypad:

        1 2 3 C
        4 5 6 D
        7 8 9 E
        A 0 B F

    Holds which of the 16 logical keys are down.  The host event loop calls press()
    and release(); the interpreter only queries.
    '''

    def __init__(self):
        self.keys_pressed = [0 for i in range(16)]

    def press(self, code):
        self.keys_pressed[code] = 1

    def release(self, code):
        self.keys_pressed[code] = 0

    def release_all(self):
        for i in range(16):
            self.keys_pressed[i] = 0

    def is_key_down(self, code):
        if code >= 16:
            # No such key
            return False
        return self.keys_pressed[code] == 1

    def current_pressed_key(self):
        for i in range(16):
            if self.keys_pressed[i]:
                return i
        return None
