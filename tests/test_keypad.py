from chip8.keypad import Keypad


def test_press_and_release():
    keypad = Keypad()
    assert keypad.current_pressed_key() is None
    keypad.press(0xA)
    assert keypad.is_key_down(0xA)
    assert not keypad.is_key_down(0xB)
    assert keypad.current_pressed_key() == 0xA
    keypad.release(0xA)
    assert keypad.current_pressed_key() is None


def test_lowest_pressed_key_wins():
    keypad = Keypad()
    keypad.press(0xF)
    keypad.press(0x3)
    assert keypad.current_pressed_key() == 0x3
    keypad.release_all()
    assert keypad.current_pressed_key() is None


def test_codes_past_the_keypad_are_never_down():
    keypad = Keypad()
    assert not keypad.is_key_down(16)
    assert not keypad.is_key_down(0xFF)
