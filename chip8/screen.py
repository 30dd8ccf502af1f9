from array import array

from chip8.constants import DISPLAY_WIDTH, DISPLAY_HEIGHT


class C8Screen:
    '''
    Monochrome frame buffer, one byte per pixel holding 0 or 1.  The renderer is kept
    separate (see chip8.frontend) so the interpreter can run without a window.

    Coordinates wrap around: a sprite drawn past the right or bottom edge reappears on
    the opposite side.
    '''

    def __init__(self, xsize=DISPLAY_WIDTH, ysize=DISPLAY_HEIGHT):
        self.resize(xsize, ysize)

    def resize(self, xsize, ysize):
        self.xsize = xsize
        self.ysize = ysize
        self.vram = array('B', [0 for i in range(self.xsize * self.ysize)])

    def clear(self):
        for i in range(self.xsize * self.ysize):
            self.vram[i] = 0

    def plot(self, x, y):
        self.vram[((y % self.ysize) * self.xsize) + (x % self.xsize)] ^= 1

    def pixel_state(self, x, y):
        return self.vram[((y % self.ysize) * self.xsize) + (x % self.xsize)]

    def size(self):
        return self.xsize * self.ysize

    def lit_pixels(self):
        for y in range(self.ysize):
            for x in range(self.xsize):
                if self.vram[(y * self.xsize) + x]:
                    yield x, y
