from chip8.screen import C8Screen


def test_standard_size(screen):
    assert (screen.xsize, screen.ysize) == (64, 32)
    assert screen.size() == 64 * 32


def test_plot_toggles(screen):
    screen.plot(3, 4)
    assert screen.pixel_state(3, 4) == 1
    screen.plot(3, 4)
    assert screen.pixel_state(3, 4) == 0


def test_coordinates_wrap(screen):
    screen.plot(64 + 5, 32 + 2)
    assert screen.pixel_state(5, 2) == 1
    assert screen.pixel_state(5 + 128, 2 + 64) == 1


def test_clear(screen):
    for x in range(0, 64, 3):
        screen.plot(x, x % 32)
    screen.clear()
    assert all(screen.pixel_state(x, y) == 0 for x in range(64) for y in range(32))
    assert list(screen.lit_pixels()) == []


def test_resize_clears_and_changes_wrap():
    screen = C8Screen()
    screen.plot(0, 0)
    screen.resize(64, 64)
    assert screen.size() == 64 * 64
    assert screen.pixel_state(0, 0) == 0
    screen.plot(0, 40)
    assert screen.pixel_state(0, 40) == 1
    assert screen.pixel_state(0, 8) == 0


def test_lit_pixels(screen):
    screen.plot(1, 2)
    screen.plot(10, 20)
    assert list(screen.lit_pixels()) == [(1, 2), (10, 20)]
