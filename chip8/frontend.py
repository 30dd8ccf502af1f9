import logging as lg
from array import array

import pygame

from chip8.constants import (
    DISPLAY_WIDTH, DISPLAY_HEIGHT, FRAME_RATE, SCALE_FACTOR, PIXEL_ON, PIXEL_OFF, DEBUG_TEXT_COLOR,
    BEEP_FREQUENCY, BEEP_VOLUME
)


KEYPAD_LAYOUT = (
    (0x1, 0x2, 0x3, 0xC),
    (0x4, 0x5, 0x6, 0xD),
    (0x7, 0x8, 0x9, 0xE),
    (0xA, 0x0, 0xB, 0xF),
)

# The left-hand 4x4 block of a QWERTY keyboard stands in for the hex keypad
KEYBOARD_LAYOUT = (
    (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4),
    (pygame.K_q, pygame.K_w, pygame.K_e, pygame.K_r),
    (pygame.K_a, pygame.K_s, pygame.K_d, pygame.K_f),
    (pygame.K_z, pygame.K_x, pygame.K_c, pygame.K_v),
)


def build_keymapping(keyboard=KEYBOARD_LAYOUT, keypad=KEYPAD_LAYOUT):
    mapping = {}
    for keyboard_row, keypad_row in zip(keyboard, keypad):
        for key, code in zip(keyboard_row, keypad_row):
            mapping[key] = code
    return mapping


KEYMAPPING = build_keymapping()

SOFT_RESET_KEY = pygame.K_F11
DEBUG_TOGGLE_KEY = pygame.K_F1


def square_wave(sample_rate, sample_size, frequency=BEEP_FREQUENCY):
    # One period of a square wave at full amplitude for the mixer's sample size
    period = int(round(sample_rate / frequency))
    amplitude = 2 ** (abs(sample_size) - 1) - 1
    half = period // 2
    return array("h", [amplitude] * half + [-amplitude] * (period - half))


def build_pygame_sound_samples(frequency=BEEP_FREQUENCY):
    sample_rate, sample_size, channels = pygame.mixer.get_init()
    return square_wave(sample_rate, sample_size, frequency)


class Beeper:
    '''Sound sink for the sound timer: a looped square wave that is either on or off.'''

    def __init__(self, volume=BEEP_VOLUME):
        self.sound = pygame.mixer.Sound(build_pygame_sound_samples())
        self.sound.set_volume(volume)
        self.beeping = False

    def set_beeping(self, val):
        if self.beeping == val:
            return
        self.beeping = val
        if val:
            self.sound.play(-1)
        else:
            self.sound.stop()


class Renderer:
    '''
    Draws a C8Screen into the window.  The pixel size is derived from the window size,
    so a 64x64 hi-res screen fills the same window as a 64x32 one.
    '''

    def __init__(self, window, pixel_on=PIXEL_ON, pixel_off=PIXEL_OFF, font=None):
        self.window = window
        self.pixel_on = pixel_on
        self.pixel_off = pixel_off
        self.font = font

    def draw(self, screen):
        self.window.fill(self.pixel_off)
        width, height = self.window.get_size()
        pix_width = width / screen.xsize
        pix_height = height / screen.ysize
        for x, y in screen.lit_pixels():
            rect = pygame.Rect(round(x * pix_width), round(y * pix_height),
                               round((x + 1) * pix_width) - round(x * pix_width),
                               round((y + 1) * pix_height) - round(y * pix_height))
            self.window.fill(self.pixel_on, rect)

    def clear(self):
        self.window.fill(self.pixel_off)

    def draw_debug(self, text):
        if self.font is None:
            return
        y = 0
        for line in text.split("\n"):
            surface = self.font.render(line, True, DEBUG_TEXT_COLOR)
            self.window.blit(surface, (0, y))
            y += surface.get_height()


def handle_key(machine, event):
    if event.type == pygame.KEYDOWN:
        if event.key == SOFT_RESET_KEY:
            if machine.is_loaded():
                machine.soft_reset()
        elif event.key == DEBUG_TOGGLE_KEY:
            machine.set_debug_mode(not machine.is_in_debug_mode())
        elif event.key in KEYMAPPING:
            machine.keypad.press(KEYMAPPING[event.key])
    elif event.type == pygame.KEYUP:
        if event.key in KEYMAPPING:
            machine.keypad.release(KEYMAPPING[event.key])


def init_pygame(scale=SCALE_FACTOR):
    pygame.mixer.pre_init(44100, -16, 1, 1024)
    pygame.init()
    window = pygame.display.set_mode((DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale))
    pygame.display.set_caption("CHIP-8")
    window.fill(0)
    return window


def run(machine, window, pixel_on=PIXEL_ON, pixel_off=PIXEL_OFF):
    '''
    Drives the machine at 60 frames per second until the window is closed.  Execution
    faults propagate to the caller, after the faulting frame has been drawn.
    '''
    pygame.font.init()
    renderer = Renderer(window, pixel_on, pixel_off, pygame.font.SysFont("monospace", 14))
    clock = pygame.time.Clock()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                lg.info("Window closed - exiting.")
                return
            handle_key(machine, event)

        if not machine.is_loaded():
            renderer.clear()
            pygame.display.flip()
            clock.tick(FRAME_RATE)
            continue

        try:
            machine.run_frame()
        finally:
            renderer.draw(machine.screen)
            if machine.is_in_debug_mode():
                renderer.draw_debug(machine.computer.debug_text())
            pygame.display.flip()

        clock.tick(FRAME_RATE)
