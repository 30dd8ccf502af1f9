# Memory configurations. The ETI 660 had half the RAM and loaded programs higher up.
MEMORY_SIZE = 4096
MEMORY_ETI660_SIZE = 2048

PROGRAM_START = 0x200
PROGRAM_ETI660_START = 0x600

# Hi-res programs start at 0x200 with a JP 0x260; the real entry point is 0x2C0.
HIRES_JUMP_TARGET = 0x260
PROGRAM_HIRES_START = 0x2C0

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
HIRES_DISPLAY_WIDTH = 64
HIRES_DISPLAY_HEIGHT = 64

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16

STEPS_PER_FRAME = 8
# Rate of around 60 Hz, in seconds
TIMER_PERIOD = 0.016667
FRAME_RATE = 60

FONT_SPRITES_START = 0x000
FONT_SPRITE_HEIGHT = 5

FONT_SPRITES = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
]

# Frontend defaults
SCALE_FACTOR = 10
PIXEL_OFF = (0, 0, 0)
PIXEL_ON = (255, 255, 255)
DEBUG_TEXT_COLOR = (255, 0, 0)
BEEP_FREQUENCY = 440
BEEP_VOLUME = 0.1
